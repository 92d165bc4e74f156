"""
Pricing engine - derives the final contract price

Pure functions of (state, catalog). Malformed numeric input degrades to zero;
there is no error path.
"""

import math
import re
from typing import Any

from ...config import CURRENCY_SUFFIX
from ..contracts.state import ContractState
from .catalog import PricingCatalog

# Plain decimal text only: no digit separators, no "nan"/"inf" spellings
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def to_number(value: Any) -> float:
    """Numeric coercion used for free-form price fields (non-numeric -> 0)"""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
        if not DECIMAL_PATTERN.match(value):
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def compute_total(state: ContractState, catalog: PricingCatalog) -> int:
    """Integer total: package + option + signed custom items + discounts"""
    total = 0.0

    package = catalog.packages.get(state.packageConfig)
    if package:
        total += package.price

    option = catalog.options.get(state.options)
    if option:
        total += option.price

    if state.hasCustomOption:
        for custom in state.customOptions:
            sign = to_number(custom.sign) or 1
            total += to_number(custom.price) * sign

    for discount_id in state.discountItems:
        discount = catalog.get_discount(discount_id)
        if discount:
            total += discount.price

    return int(round(total))


def format_price(amount: int) -> str:
    """Group thousands and append the currency suffix, e.g. -10,000원"""
    return f"{amount:,}{CURRENCY_SUFFIX}"


def compute_final_price(state: ContractState, catalog: PricingCatalog) -> str:
    """Formatted final price; identical inputs always give the identical string"""
    return format_price(compute_total(state, catalog))
