"""Share domain schemas"""

from typing import Optional

from pydantic import BaseModel

from ..contracts.state import ContractState


class ShareLinkRequest(BaseModel):
    state: ContractState
    baseUrl: Optional[str] = None


class ShareLinkResponse(BaseModel):
    url: str
    length: int


class OpenLinkRequest(BaseModel):
    url: str


class OpenLinkResponse(BaseModel):
    """mode is 'received' when the URL carried a contract, otherwise 'authoring'"""

    mode: str
    state: ContractState
