"""
Menu Catalog Backend - Form Validation Tests
=============================================

What:  Tests for MenuItemFields.from_form, the validation policy applied to
       create and update forms.
"""

import pytest

from app.exceptions import ValidationError
from app.schemas.menu_item import MenuItemFields


class TestMenuItemFields:

    def test_valid_form_parses_price(self):
        fields = MenuItemFields.from_form(name="Burger", price="9.99", category="Mains")
        assert fields.price == 9.99
        assert isinstance(fields.price, float)

    def test_text_fields_are_stripped(self):
        fields = MenuItemFields.from_form(name="  Burger ", price="1", category=" Mains ")
        assert (fields.name, fields.category) == ("Burger", "Mains")

    @pytest.mark.parametrize("price", ["abc", "9.99.1", "nan", "inf", "-1"])
    def test_bad_price_rejected(self, price):
        with pytest.raises(ValidationError) as exc_info:
            MenuItemFields.from_form(name="Burger", price=price, category="Mains")
        assert exc_info.value.field == "price"
        assert "price" in exc_info.value.message

    def test_zero_price_allowed(self):
        assert MenuItemFields.from_form(name="Water", price="0", category="Drinks").price == 0.0

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_missing_name_rejected(self, name):
        with pytest.raises(ValidationError, match="name is required"):
            MenuItemFields.from_form(name=name, price="1", category="Mains")

    def test_missing_category_rejected(self):
        with pytest.raises(ValidationError, match="category is required"):
            MenuItemFields.from_form(name="Burger", price="1", category=None)

    def test_missing_price_rejected(self):
        with pytest.raises(ValidationError, match="price is required"):
            MenuItemFields.from_form(name="Burger", price=None, category="Mains")

    def test_overlong_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            MenuItemFields.from_form(name="x" * 256, price="1", category="Mains")
        assert exc_info.value.field == "name"
