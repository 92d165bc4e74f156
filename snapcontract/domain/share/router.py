"""Share router - build and open self-contained contract links"""

import logging

from fastapi import APIRouter, Depends

from ..contracts.router import get_pricing_catalog
from ..contracts.session import ContractSession
from ..pricing.catalog import PricingCatalog
from .link import MODE_AUTHORING, MODE_RECEIVED, build_link, parse_link, share_mode
from .schemas import OpenLinkRequest, OpenLinkResponse, ShareLinkRequest, ShareLinkResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contracts", tags=["Share"])


@router.post("/share", response_model=ShareLinkResponse)
async def create_share_link(data: ShareLinkRequest):
    """Pack the whole contract into a URL for the second party"""
    url = build_link(data.state, data.baseUrl)
    return ShareLinkResponse(url=url, length=len(url))


@router.post("/open", response_model=OpenLinkResponse)
async def open_share_link(
    data: OpenLinkRequest,
    catalog: PricingCatalog = Depends(get_pricing_catalog),
):
    """
    Decode a shared contract. Without a data parameter the caller stays in
    authoring mode with a fresh contract. Malformed or corrupted links are
    rejected by the ShareLinkError handler in main.
    """
    if share_mode(data.url) == MODE_AUTHORING:
        return OpenLinkResponse(mode=MODE_AUTHORING, state=ContractSession(catalog).state)

    session = ContractSession(catalog)
    session.replace(parse_link(data.url))
    return OpenLinkResponse(mode=MODE_RECEIVED, state=session.state)
