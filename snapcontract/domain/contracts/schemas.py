"""Contract domain schemas - Pydantic models for events and responses"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from .state import ContractState


class UpdateFieldEvent(BaseModel):
    """Replace a text, enum or boolean form field"""

    type: Literal["update_field"]
    field: str
    value: Any = None


class ToggleDiscountEvent(BaseModel):
    type: Literal["toggle_discount"]
    discountId: str


class AddCustomOptionEvent(BaseModel):
    type: Literal["add_custom_option"]


class RemoveCustomOptionEvent(BaseModel):
    type: Literal["remove_custom_option"]
    optionId: int


class UpdateCustomOptionEvent(BaseModel):
    type: Literal["update_custom_option"]
    optionId: int
    field: str
    value: Any = None


class SetSignatureEvent(BaseModel):
    type: Literal["set_signature"]
    signature: str  # Base64 image data URL from the signature pad


class ClearSignatureEvent(BaseModel):
    type: Literal["clear_signature"]


class SetLogoEvent(BaseModel):
    type: Literal["set_logo"]
    logoImage: Optional[str] = None


ContractEvent = Annotated[
    Union[
        UpdateFieldEvent,
        ToggleDiscountEvent,
        AddCustomOptionEvent,
        RemoveCustomOptionEvent,
        UpdateCustomOptionEvent,
        SetSignatureEvent,
        ClearSignatureEvent,
        SetLogoEvent,
    ],
    Field(discriminator="type"),
]


class ContractEventRequest(BaseModel):
    state: ContractState
    event: ContractEvent


class ContractEventResponse(BaseModel):
    state: ContractState
    priceUpdated: bool


class PriceRequest(BaseModel):
    state: ContractState


class PriceResponse(BaseModel):
    total: int
    finalPrice: str
