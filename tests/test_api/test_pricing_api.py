"""
HTTP surface tests, services replaced with mocks
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.api.discounts import get_discount_service
from app.api.pricing import get_pricing_service
from app.core.config import settings
from app.core.exceptions import DuplicateDiscountCodeError, InvalidDiscountError
from app.main import app
from app.models.discount import ApplicableDiscount, PriceWithDiscount
from app.services.discount_service import DiscountService
from app.services.pricing_service import PricingService

ADMIN_HEADERS = {"X-Admin-Key": settings.admin_api_key}


@pytest.fixture
def pricing_service():
    return AsyncMock(spec=PricingService)


@pytest.fixture
def discount_service():
    return AsyncMock(spec=DiscountService)


@pytest.fixture
def client(pricing_service, discount_service):
    app.dependency_overrides[get_pricing_service] = lambda: pricing_service
    app.dependency_overrides[get_discount_service] = lambda: discount_service
    # no context manager: the lifespan would connect to PostgreSQL
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestPricingApi:

    def test_price_with_discount(self, client, pricing_service, make_discount):
        discount = make_discount(discount_value=Decimal("20"))
        pricing_service.get_price_with_discount.return_value = PriceWithDiscount(
            original_price=Decimal("1200"),
            discounted_price=Decimal("990"),
            has_discount=True,
            discount=discount
        )

        response = client.get("/api/pricing/services/screen-replacement/models/iphone-15-pro?price=1200")

        assert response.status_code == 200
        body = response.json()
        assert body["originalPrice"] == 1200
        assert body["discountedPrice"] == 990
        assert body["hasDiscount"] is True
        assert body["discount"]["id"] == discount.id
        assert body["discount"]["discountType"] == "percentage"
        pricing_service.get_price_with_discount.assert_called_once_with(
            "screen-replacement", "iphone-15-pro", Decimal("1200")
        )

    def test_price_without_discount(self, client, pricing_service):
        pricing_service.get_price_with_discount.return_value = PriceWithDiscount(
            original_price=Decimal("1200"),
            discounted_price=Decimal("1200"),
            has_discount=False
        )

        response = client.get("/api/pricing/services/screen-replacement/models/unknown?price=1200")

        assert response.status_code == 200
        assert response.json() == {
            "originalPrice": 1200,
            "discountedPrice": 1200,
            "hasDiscount": False,
            "discount": None,
        }

    def test_negative_price(self, client, pricing_service):
        response = client.get("/api/pricing/services/screen-replacement/models/iphone-15-pro?price=-5")

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        pricing_service.get_price_with_discount.assert_not_called()

    def test_missing_price(self, client):
        response = client.get("/api/pricing/services/screen-replacement/models/iphone-15-pro")
        assert response.status_code == 422

    def test_database_outage(self, client, pricing_service):
        pricing_service.get_price_with_discount.side_effect = OperationalError("SELECT", {}, Exception("down"))

        response = client.get("/api/pricing/services/screen-replacement/models/iphone-15-pro?price=1200")

        assert response.status_code == 503
        assert response.json()["error"] == "service_unavailable"


class TestAdminDiscountApi:

    def test_admin_key_required(self, client, discount_service):
        response = client.get("/api/admin/discounts")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        discount_service.get_active_discounts.assert_not_called()

    def test_wrong_admin_key(self, client):
        response = client.get("/api/admin/discounts", headers={"X-Admin-Key": "nope"})
        assert response.status_code == 401

    def test_list_active(self, client, discount_service, make_discount):
        discount_service.get_active_discounts.return_value = [make_discount(code="SPRING20")]

        response = client.get("/api/admin/discounts", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        assert response.json()[0]["code"] == "SPRING20"
        assert response.json()[0]["discountValue"] == 20

    def test_create(self, client, discount_service, make_discount):
        discount_service.create_discount.return_value = make_discount(code="APPLE20")

        response = client.post("/api/admin/discounts", headers=ADMIN_HEADERS, json={
            "name": "Apple week",
            "code": "apple20",
            "discountType": "percentage",
            "discountValue": 20,
            "scopeType": "brand",
            "brandId": "apple",
            "serviceIds": ["screen-replacement"],
        })

        assert response.status_code == 201
        assert response.json()["code"] == "APPLE20"
        data = discount_service.create_discount.call_args.args[0]
        assert data.code == "APPLE20"
        assert data.brand_id == "apple"

    def test_create_invalid_rule(self, client, discount_service):
        response = client.post("/api/admin/discounts", headers=ADMIN_HEADERS, json={
            "name": "Broken",
            "code": "BROKEN",
            "discountType": "percentage",
            "discountValue": 120,
            "scopeType": "all_models",
        })

        assert response.status_code == 422
        discount_service.create_discount.assert_not_called()

    def test_create_duplicate(self, client, discount_service):
        discount_service.create_discount.side_effect = DuplicateDiscountCodeError("APPLE20")

        response = client.post("/api/admin/discounts", headers=ADMIN_HEADERS, json={
            "name": "Apple week",
            "code": "APPLE20",
            "discountType": "fixed",
            "discountValue": 200,
            "scopeType": "all_models",
        })

        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_discount_code"

    def test_code_not_found(self, client, discount_service):
        discount_service.find_discount_by_code.return_value = None

        response = client.get("/api/admin/discounts/code/NOPE", headers=ADMIN_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "discount_not_found"

    def test_applicable(self, client, discount_service, make_discount):
        discount_service.find_applicable_discounts.return_value = [
            ApplicableDiscount(
                discount=make_discount(),
                applicable_to="All models",
                display_value="20%",
                scope_description="Discount on all models"
            )
        ]

        response = client.get(
            "/api/admin/discounts/applicable",
            params={"service_id": "screen-replacement", "model_id": "iphone-15-pro"},
            headers=ADMIN_HEADERS
        )

        assert response.status_code == 200
        assert response.json()[0]["applicableTo"] == "All models"
        assert response.json()[0]["displayValue"] == "20%"
        discount_service.find_applicable_discounts.assert_called_once_with("screen-replacement", "iphone-15-pro")

    def test_delete(self, client, discount_service):
        response = client.delete("/api/admin/discounts/d-1", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        discount_service.delete_discount.assert_called_once_with("d-1")

    def test_update_null_for_required_column(self, client, discount_service):
        response = client.put(
            "/api/admin/discounts/d-1",
            headers=ADMIN_HEADERS,
            json={"isActive": None, "name": None, "discountValue": None}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        discount_service.update_discount.assert_not_called()

    def test_update_breaking_stored_rule(self, client, discount_service):
        discount_service.update_discount.side_effect = InvalidDiscountError("percentage discount cannot exceed 100")

        response = client.put("/api/admin/discounts/d-1", headers=ADMIN_HEADERS, json={"discountType": "percentage"})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_discount"
