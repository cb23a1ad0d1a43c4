"""
Unit tests for the product write and read DTOs.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from product_sync.events import INT32_MAX
from shop_service.app.models.product import ProductType
from shop_service.app.schemas.product import ProductRead, ProductWrite


class TestProductWrite:
    """Validation rules of the write DTO."""

    def test_accepts_wire_field_names(self, sample_product_data):
        product = ProductWrite.model_validate(sample_product_data)

        assert product.name == "Test Product"
        assert product.product_type is ProductType.OTHER
        assert product.expiration_date == date(2002, 2, 18)
        assert product.quantity == 5

    def test_accepts_product_type_alias(self):
        product = ProductWrite.model_validate(
            {"name": "Milk", "productType": "DAIRY", "expirationDate": "2030-01-01"}
        )

        assert product.product_type is ProductType.DAIRY

    def test_missing_quantity_defaults_to_zero(self):
        product = ProductWrite.model_validate(
            {"name": "Carrot", "productTypeDTO": "VEGETABLES", "expirationDate": "2030-01-01"}
        )

        assert product.quantity is None
        assert product.effective_quantity == 0

    def test_name_is_kept_as_sent(self, sample_product_data):
        sample_product_data["name"] = "  Apple  "

        assert ProductWrite.model_validate(sample_product_data).name == "  Apple  "

    @pytest.mark.parametrize("name", ["", "   "])
    def test_rejects_blank_name(self, sample_product_data, name):
        sample_product_data["name"] = name

        with pytest.raises(ValidationError):
            ProductWrite.model_validate(sample_product_data)

    def test_rejects_unknown_product_type(self, sample_product_data):
        sample_product_data["productTypeDTO"] = "TOYS"

        with pytest.raises(ValidationError):
            ProductWrite.model_validate(sample_product_data)

    @pytest.mark.parametrize("value", ["18-02-2002", "2002-02-30", "tomorrow", 20020218])
    def test_rejects_non_iso_expiration_date(self, sample_product_data, value):
        sample_product_data["expirationDate"] = value

        with pytest.raises(ValidationError):
            ProductWrite.model_validate(sample_product_data)

    @pytest.mark.parametrize("quantity", [-1, INT32_MAX + 1])
    def test_rejects_out_of_range_quantity(self, sample_product_data, quantity):
        sample_product_data["quantity"] = quantity

        with pytest.raises(ValidationError):
            ProductWrite.model_validate(sample_product_data)


class TestProductRead:
    def test_to_json_uses_wire_names(self):
        product = ProductRead(
            id=1,
            name="Test Product",
            product_type=ProductType.OTHER,
            expiration_date=date(2002, 2, 18),
            quantity=0,
        )

        assert product.to_json() == {
            "id": 1,
            "name": "Test Product",
            "productTypeDTO": "OTHER",
            "expirationDate": "2002-02-18",
            "quantity": 0,
        }
