"""Export domain schemas"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ...config import PAGE_BREAK_BUFFER_PX, PAGE_HEIGHT_PX
from ..contracts.state import ContractState


class PreviewRequest(BaseModel):
    state: ContractState
    pageDividers: int = Field(0, ge=0, le=50)


class ExportRequest(BaseModel):
    state: ContractState


class LayoutBlockIn(BaseModel):
    top: float
    height: float = Field(..., ge=0)


class PageBreakRequest(BaseModel):
    blocks: List[LayoutBlockIn]
    pageHeight: float = Field(PAGE_HEIGHT_PX, gt=0)
    buffer: float = Field(PAGE_BREAK_BUFFER_PX, ge=0)
    contentHeight: Optional[float] = None


class PageBreakResponse(BaseModel):
    margins: List[float]
    adjustedTops: List[float]
    movedBlocks: List[int]
    totalShift: float
    pageCount: Optional[int] = None
