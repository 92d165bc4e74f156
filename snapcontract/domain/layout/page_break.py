"""
Page break planner

Given atomic blocks measured on a continuous render (top offset and height in
render px) and a fixed page height, compute the extra top margin each block
needs so that none of them straddles a page boundary once the render is sliced
into pages. Blocks are processed in document order; a block's margin shifts
only the blocks after it.

The plan is only valid for the measurement it was computed from. After the
margins are applied the layout must be re-measured before planning again.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Union

from ...config import PAGE_BREAK_BUFFER_PX, PAGE_HEIGHT_PX


@dataclass(frozen=True)
class LayoutBlock:
    top: float
    height: float


@dataclass
class PageBreakPlan:
    page_height: float
    buffer: float
    margins: List[float] = field(default_factory=list)
    adjusted_tops: List[float] = field(default_factory=list)
    total_shift: float = 0.0

    @property
    def moved_blocks(self) -> List[int]:
        return [index for index, margin in enumerate(self.margins) if margin > 0]

    def page_count(self, content_height: float) -> int:
        """Pages needed for content_height px of original content plus the added margins"""
        return max(1, math.ceil((content_height + self.total_shift) / self.page_height))


BlockLike = Union[LayoutBlock, Sequence[float], dict]


def _as_block(block: BlockLike) -> LayoutBlock:
    if isinstance(block, LayoutBlock):
        return block
    if isinstance(block, dict):
        return LayoutBlock(top=float(block["top"]), height=float(block["height"]))
    top, height = block
    return LayoutBlock(top=float(top), height=float(height))


def plan_page_breaks(
    blocks: Iterable[BlockLike],
    page_height: float = PAGE_HEIGHT_PX,
    buffer: float = PAGE_BREAK_BUFFER_PX,
) -> PageBreakPlan:
    """Compute per-block top margins so no block crosses a page boundary"""
    if page_height <= 0:
        raise ValueError("page_height must be positive")

    plan = PageBreakPlan(page_height=page_height, buffer=buffer)
    cumulative = 0.0

    for block in map(_as_block, blocks):
        effective_top = block.top + cumulative
        start_page = math.floor(effective_top / page_height)
        end_page = math.floor((effective_top + block.height) / page_height)

        margin = 0.0
        if start_page != end_page:
            margin = (start_page + 1) * page_height - effective_top + buffer
            cumulative += margin

        plan.margins.append(margin)
        plan.adjusted_tops.append(effective_top + margin)

    plan.total_shift = cumulative
    return plan
