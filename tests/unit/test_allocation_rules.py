"""Unit tests for allocation rules and category rule validation."""

from decimal import Decimal

import pytest

from budgetapp.core.allocation import (
    FixedAmountRule,
    NoAllocation,
    PercentageRule,
    has_conflicting_fields,
    is_whole_paise,
    quantize_money,
    rule_from_fields,
)
from budgetapp.core.exceptions import InvalidAllocation, InvalidAmount, InvalidPercentage
from budgetapp.services.allocation import DEFAULT_BUDGET_PLAN, CategorySpec, validate_rule


class TestEntitledBalance:
    """Balances derived from salary."""

    def test_percentage_of_salary(self):
        rule = PercentageRule(Decimal("25"))
        assert rule.entitled_balance(Decimal("50000")) == Decimal("12500.00")

    def test_percentage_rounds_half_up_to_paise(self):
        rule = PercentageRule(Decimal("33.33"))
        # 1001 * 33.33 / 100 = 333.6333
        assert rule.entitled_balance(Decimal("1001")) == Decimal("333.63")
        assert PercentageRule(Decimal("0.5")).entitled_balance(Decimal("1.01")) == Decimal("0.01")

    def test_fixed_amount_ignores_salary(self):
        rule = FixedAmountRule(Decimal("3000"))
        assert rule.entitled_balance(Decimal("50000")) == Decimal("3000.00")
        assert rule.entitled_balance(Decimal("1")) == Decimal("3000.00")

    def test_no_allocation_is_zero(self):
        assert NoAllocation().entitled_balance(Decimal("50000")) == Decimal("0.00")

    def test_quantize_money(self):
        assert quantize_money(Decimal("10.005")) == Decimal("10.01")
        assert quantize_money(Decimal("10")) == Decimal("10.00")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10", True),
            ("10.5", True),
            ("10.50", True),
            ("10.500", True),
            ("1E+3", True),
            ("0.001", False),
            ("10.005", False),
            ("99.9990", False),
        ],
    )
    def test_is_whole_paise(self, value, expected):
        assert is_whole_paise(Decimal(value)) is expected


class TestRuleFromFields:
    """Mapping stored columns onto a rule."""

    def test_percentage(self):
        assert rule_from_fields(Decimal("10"), Decimal("0")) == PercentageRule(Decimal("10"))

    def test_fixed(self):
        assert rule_from_fields(Decimal("0"), Decimal("500")) == FixedAmountRule(Decimal("500"))

    def test_none_values(self):
        assert rule_from_fields(None, None) == NoAllocation()

    def test_percentage_wins_when_both_set(self):
        """Legacy rows with both fields resolve to the percentage rule."""
        rule = rule_from_fields(Decimal("10"), Decimal("500"))
        assert isinstance(rule, PercentageRule)

    def test_conflicting_fields(self):
        assert has_conflicting_fields(Decimal("10"), Decimal("500")) is True
        assert has_conflicting_fields(Decimal("10"), Decimal("0")) is False
        assert has_conflicting_fields(None, Decimal("500")) is False


class TestValidateRule:
    """Input validation for create/update."""

    @pytest.mark.parametrize("percentage", ["0", "50", "100", "12.5"])
    def test_valid_percentages(self, percentage):
        validate_rule(CategorySpec("Food", percentage=Decimal(percentage)))

    @pytest.mark.parametrize("percentage", ["-1", "100.01", "150", "NaN", "Infinity"])
    def test_invalid_percentages(self, percentage):
        with pytest.raises(InvalidPercentage):
            validate_rule(CategorySpec("Food", percentage=Decimal(percentage)))

    def test_negative_fixed_amount(self):
        with pytest.raises(InvalidAmount):
            validate_rule(CategorySpec("Rent", fixed_amount=Decimal("-10")))

    def test_both_percentage_and_fixed(self):
        with pytest.raises(InvalidAllocation) as exc_info:
            validate_rule(
                CategorySpec("Food", percentage=Decimal("10"), fixed_amount=Decimal("100"))
            )
        assert exc_info.value.error_code == "ALLOC_005"

    def test_zero_fixed_with_percentage_is_allowed(self):
        validate_rule(CategorySpec("Food", percentage=Decimal("10"), fixed_amount=Decimal("0")))


def test_default_plan_is_valid():
    """The default plan sums to 100% and every entry passes validation."""
    for spec in DEFAULT_BUDGET_PLAN:
        validate_rule(spec)
    assert sum(spec.percentage for spec in DEFAULT_BUDGET_PLAN) == Decimal("100")
    assert len({spec.name.lower() for spec in DEFAULT_BUDGET_PLAN}) == len(DEFAULT_BUDGET_PLAN)
