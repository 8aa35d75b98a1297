"""
Business exceptions

Raised by services, translated to HTTP responses by app.api.exceptions.
"""


class BusinessException(Exception):
    """Base class for expected, client-facing failures"""

    def __init__(self, message: str, code: str = "business_error", status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class DiscountNotFoundError(BusinessException):

    def __init__(self, discount_ref: str):
        super().__init__(f"Discount not found: {discount_ref}", code="discount_not_found", status_code=404)


class DuplicateDiscountCodeError(BusinessException):

    def __init__(self, code: str):
        super().__init__(f"Discount code already exists: {code}", code="duplicate_discount_code", status_code=409)


class InvalidDiscountError(BusinessException):

    def __init__(self, message: str):
        super().__init__(message, code="invalid_discount", status_code=422)


class InvalidPriceError(BusinessException):

    def __init__(self, price):
        super().__init__(f"Price must not be negative: {price}", code="invalid_price", status_code=422)


class AdminAuthError(BusinessException):

    def __init__(self):
        super().__init__("Unauthorized", code="unauthorized", status_code=401)
