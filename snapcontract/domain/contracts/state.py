"""Contract state - the single source of truth for one contract being authored"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..pricing.catalog import NO_OPTION_KEY

# Fields a form edit may replace directly (value is coerced by the model)
EDITABLE_FIELDS = frozenset(
    {
        "contractorName",
        "venue",
        "contact",
        "weddingDate",
        "weddingTime",
        "packageConfig",
        "options",
        "hasCustomOption",
    }
)

CUSTOM_OPTION_EDITABLE_FIELDS = frozenset({"name", "price", "sign"})


class CustomOption(BaseModel):
    """Open-ended signed line item added by the operator"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str = ""
    # Raw form input; the pricing engine coerces non-numeric values to 0
    price: Union[int, float, str, None] = 0
    sign: Literal[1, -1] = 1


class ContractState(BaseModel):
    """Immutable snapshot; every change produces a new instance via model_copy"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    contractorName: str = ""
    venue: str = ""
    contact: str = ""
    weddingDate: str = ""
    weddingTime: str = ""
    packageConfig: str = ""
    options: str = NO_OPTION_KEY
    hasCustomOption: bool = False
    customOptions: List[CustomOption] = Field(default_factory=list)
    discountItems: List[str] = Field(default_factory=list)
    finalPrice: str = ""
    signature: Optional[str] = None
    logoImage: Optional[str] = None

    @field_validator("discountItems")
    @classmethod
    def dedupe_discount_items(cls, value: List[str]) -> List[str]:
        # Selected discounts form a set; keep first-seen order
        return list(dict.fromkeys(value))

    def replace(self, **changes) -> "ContractState":
        """Return a validated copy with the given fields replaced"""
        data = self.model_dump()
        data.update(changes)
        return ContractState.model_validate(data)

