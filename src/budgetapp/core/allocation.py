"""Allocation rules: how a category's entitled balance derives from salary.

A category stores its rule in two numeric columns (``percentage`` and
``fixed_amount``). In code the rule is a tagged variant so the two options
cannot be mixed by accident.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
    """Round to paise (two places), half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def is_whole_paise(value: Decimal) -> bool:
    """True when a finite amount has no nonzero digits past two decimal places."""
    _, digits, exponent = value.as_tuple()
    if exponent >= -2:
        return True
    return not any(digits[exponent + 2:])


@dataclass(frozen=True)
class PercentageRule:
    percentage: Decimal

    def entitled_balance(self, salary: Decimal) -> Decimal:
        return quantize_money(salary * self.percentage / HUNDRED)


@dataclass(frozen=True)
class FixedAmountRule:
    amount: Decimal

    def entitled_balance(self, salary: Decimal) -> Decimal:
        return quantize_money(self.amount)


@dataclass(frozen=True)
class NoAllocation:
    def entitled_balance(self, salary: Decimal) -> Decimal:
        return quantize_money(ZERO)


AllocationRule = Union[PercentageRule, FixedAmountRule, NoAllocation]


def rule_from_fields(
    percentage: Decimal | None, fixed_amount: Decimal | None
) -> AllocationRule:
    """Build the rule for stored column values.

    Percentage wins when both are nonzero; callers that accept user input
    reject that combination before it reaches storage.
    """
    percentage = percentage or ZERO
    fixed_amount = fixed_amount or ZERO
    if percentage > ZERO:
        return PercentageRule(percentage)
    if fixed_amount > ZERO:
        return FixedAmountRule(fixed_amount)
    return NoAllocation()


def has_conflicting_fields(
    percentage: Decimal | None, fixed_amount: Decimal | None
) -> bool:
    return bool(percentage) and bool(fixed_amount)
