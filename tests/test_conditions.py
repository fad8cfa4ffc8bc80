"""
Tests for condition values
"""

from decimal import Decimal

import pytest

from shopping_cart.domain.conditions import Amount, Condition, Percentage, parse_value


class TestParseValue:

    def test_percent_string_is_percentage(self):
        assert parse_value("10%") == Percentage(Decimal("10"))
        assert parse_value(" 12.5 %") == Percentage(Decimal("12.5"))

    def test_number_is_amount(self):
        assert parse_value(10) == Amount(Decimal("10"))
        assert parse_value(4.99) == Amount(Decimal("4.99"))
        assert parse_value("5.50") == Amount(Decimal("5.50"))

    def test_percentage_target_makes_bare_number_a_percentage(self):
        assert parse_value(10, "percentage") == Percentage(Decimal("10"))

    def test_tagged_values_pass_through(self):
        value = Amount(Decimal("3"))
        assert parse_value(value, "percentage") is value


class TestResolve:

    def test_percentage_of_base(self):
        assert Percentage(Decimal("10")).resolve(Decimal("200.00")) == Decimal("20")

    def test_amount_ignores_base(self):
        assert Amount(Decimal("7.50")).resolve(Decimal("200.00")) == Decimal("7.50")


class TestCondition:

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            Condition(type="bonus", value=5)

    def test_cart_condition_to_dict(self):
        condition = Condition(type="discount", value="10%", name="sale")

        assert condition.to_dict() == {
            "name": "sale",
            "type": "discount",
            "value": "10%",
            "target": "subtotal",
            "rules": {},
        }

    def test_item_condition_to_dict_has_no_name_or_rules(self):
        condition = Condition(type="fee", value=Decimal("2.00"), target="subtotal")

        assert condition.to_dict() == {"type": "fee", "value": Decimal("2.00"), "target": "subtotal"}

    def test_from_dict_round_trip(self):
        data = {"name": "shipping", "type": "fee", "value": "5.00", "target": "total", "rules": {"min": 10}}

        condition = Condition.from_dict(data)

        assert condition.value == Amount(Decimal("5.00"))
        assert Condition.from_dict(condition.to_dict()) == condition

    def test_cart_condition_with_percentage_target_keeps_bare_number_as_amount(self):
        condition = Condition(type="discount", value=10, target="percentage", name="coupon")

        assert condition.value == Amount(Decimal("10"))
        assert condition.resolve(Decimal("200.00")) == Decimal("10")

    def test_item_condition_with_percentage_target_is_a_percentage(self):
        condition = Condition.for_item({"type": "discount", "value": 10, "target": "percentage"})

        assert condition.value == Percentage(Decimal("10"))
        assert condition.resolve(Decimal("200.00")) == Decimal("20")
