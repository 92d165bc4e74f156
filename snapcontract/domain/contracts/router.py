"""Contract router - catalog, new contracts, form events and pricing"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..pricing.catalog import PricingCatalog, get_catalog
from ..pricing.engine import compute_total, format_price
from .schemas import (
    AddCustomOptionEvent,
    ClearSignatureEvent,
    ContractEventRequest,
    ContractEventResponse,
    PriceRequest,
    PriceResponse,
    RemoveCustomOptionEvent,
    SetLogoEvent,
    SetSignatureEvent,
    ToggleDiscountEvent,
    UpdateCustomOptionEvent,
    UpdateFieldEvent,
)
from .session import ContractSession, new_contract_state
from .state import ContractState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contracts", tags=["Contracts"])


def get_pricing_catalog() -> PricingCatalog:
    """Dependency injection for the pricing catalog"""
    return get_catalog()


@router.get("/catalog", response_model=PricingCatalog)
async def get_pricing_catalog_route(catalog: PricingCatalog = Depends(get_pricing_catalog)):
    """Packages, options and discounts for the form"""
    return catalog


@router.get("/new", response_model=ContractState)
async def new_contract(catalog: PricingCatalog = Depends(get_pricing_catalog)):
    """Fresh contract with catalog defaults"""
    return new_contract_state(catalog)


@router.post("/events", response_model=ContractEventResponse)
async def apply_contract_event(
    data: ContractEventRequest,
    catalog: PricingCatalog = Depends(get_pricing_catalog),
):
    """Apply one form event to the given snapshot and return the reconciled snapshot"""
    session = ContractSession(catalog, data.state)
    event = data.event

    try:
        if isinstance(event, UpdateFieldEvent):
            session.update_field(event.field, event.value)
        elif isinstance(event, ToggleDiscountEvent):
            session.toggle_discount(event.discountId)
        elif isinstance(event, AddCustomOptionEvent):
            session.add_custom_option()
        elif isinstance(event, RemoveCustomOptionEvent):
            session.remove_custom_option(event.optionId)
        elif isinstance(event, UpdateCustomOptionEvent):
            session.update_custom_option(event.optionId, event.field, event.value)
        elif isinstance(event, SetSignatureEvent):
            session.set_signature(event.signature)
        elif isinstance(event, ClearSignatureEvent):
            session.clear_signature()
        elif isinstance(event, SetLogoEvent):
            session.set_logo(event.logoImage)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0])) from e
    except ValueError as e:
        # pydantic ValidationError is a ValueError subclass
        raise HTTPException(status_code=400, detail=str(e)) from e

    return ContractEventResponse(
        state=session.state,
        priceUpdated=session.state.finalPrice != data.state.finalPrice,
    )


@router.post("/price", response_model=PriceResponse)
async def compute_price(data: PriceRequest, catalog: PricingCatalog = Depends(get_pricing_catalog)):
    """Price the given snapshot without changing it"""
    total = compute_total(data.state, catalog)
    return PriceResponse(total=total, finalPrice=format_price(total))
