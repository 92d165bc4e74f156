"""
Pricing catalog - packages, add-on options and discounts

The catalog is configuration, not user data. The engine and the preview read it
as data so new packages/options/discounts never require code changes.
"""

import json
import logging
import os
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...config import PRICING_CATALOG_PATH

logger = logging.getLogger(__name__)

NO_OPTION_KEY = "none"


class PackageDefinition(BaseModel):
    label: str
    price: float = Field(0, ge=0)


class OptionDefinition(BaseModel):
    label: str
    price: float = 0


class DiscountDefinition(BaseModel):
    id: str
    label: str
    # Negative by convention; the engine adds it as-is
    price: float = 0


class PricingCatalog(BaseModel):
    """Static pricing configuration consumed by the engine and the preview"""

    packages: Dict[str, PackageDefinition]
    options: Dict[str, OptionDefinition] = Field(
        default_factory=lambda: {NO_OPTION_KEY: OptionDefinition(label="선택 안함", price=0)}
    )
    discounts: List[DiscountDefinition] = Field(default_factory=list)

    @property
    def default_package_key(self) -> str:
        """First package key, used when a new contract is created"""
        return next(iter(self.packages), "")

    def get_discount(self, discount_id: str) -> Optional[DiscountDefinition]:
        for discount in self.discounts:
            if discount.id == discount_id:
                return discount
        return None

    def ordered_discounts(self, discount_ids: List[str]) -> List[DiscountDefinition]:
        """Selected discounts in catalog order (unknown ids are dropped)"""
        selected = set(discount_ids)
        return [discount for discount in self.discounts if discount.id in selected]

    def order_discount_ids(self, discount_ids: List[str]) -> List[str]:
        """Deduplicate ids and sort them into catalog order, unknown ids last"""
        known = [d.id for d in self.ordered_discounts(discount_ids)]
        unknown = []
        for discount_id in discount_ids:
            if discount_id not in known and discount_id not in unknown:
                unknown.append(discount_id)
        return known + unknown


DEFAULT_CATALOG_DATA = {
    "packages": {
        "standard": {"label": "원본형", "price": 220000},
        "retouch": {"label": "보정형", "price": 280000},
        "video": {"label": "영상형", "price": 380000},
    },
    "options": {
        NO_OPTION_KEY: {"label": "선택 안함", "price": 0},
        "banquet": {"label": "연회장 촬영", "price": 50000},
        "second_shooter": {"label": "2인 촬영", "price": 100000},
    },
    "discounts": [
        {"id": "partner", "label": "짝꿍 할인", "price": -10000},
        {"id": "review", "label": "후기 할인", "price": -20000},
        {"id": "early_booking", "label": "얼리 예약 할인", "price": -30000},
    ],
}


def load_catalog(path: Optional[str] = None) -> PricingCatalog:
    """Load the catalog from a JSON file, or the built-in default when no path is given"""
    if not path:
        return PricingCatalog.model_validate(DEFAULT_CATALOG_DATA)

    if not os.path.exists(path):
        raise FileNotFoundError(f"Pricing catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    catalog = PricingCatalog.model_validate(data)
    logger.info(
        f"📦 Loaded pricing catalog from {path}: {len(catalog.packages)} packages, "
        f"{len(catalog.options)} options, {len(catalog.discounts)} discounts"
    )
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> PricingCatalog:
    """Process-wide catalog (configured via PRICING_CATALOG_PATH)"""
    return load_catalog(PRICING_CATALOG_PATH)
