"""Export router - preview HTML, page-break planning and PDF download"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response

from ..contracts.router import get_pricing_catalog
from ..contracts.session import ContractSession
from ..layout.page_break import plan_page_breaks
from ..pricing.catalog import PricingCatalog
from .exporter import DocumentExporter
from .preview import contract_filename, render_contract_html
from .schemas import ExportRequest, PageBreakRequest, PageBreakResponse, PreviewRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contracts", tags=["Contracts Export"])


def get_document_exporter(catalog: PricingCatalog = Depends(get_pricing_catalog)) -> DocumentExporter:
    """Dependency injection for DocumentExporter"""
    return DocumentExporter(catalog)


@router.post("/preview", response_class=HTMLResponse)
async def preview_contract(
    data: PreviewRequest,
    catalog: PricingCatalog = Depends(get_pricing_catalog),
):
    """Printable contract HTML (page dividers are preview-only)"""
    return HTMLResponse(render_contract_html(data.state, catalog, page_dividers=data.pageDividers))


@router.post("/layout/page-breaks", response_model=PageBreakResponse)
async def plan_contract_page_breaks(data: PageBreakRequest):
    """Extra top margins that keep measured blocks off page boundaries"""
    plan = plan_page_breaks(
        [(block.top, block.height) for block in data.blocks],
        page_height=data.pageHeight,
        buffer=data.buffer,
    )
    return PageBreakResponse(
        margins=plan.margins,
        adjustedTops=plan.adjusted_tops,
        movedBlocks=plan.moved_blocks,
        totalShift=plan.total_shift,
        pageCount=plan.page_count(data.contentHeight) if data.contentHeight is not None else None,
    )


@router.post("/export")
async def export_contract_pdf(
    data: ExportRequest,
    catalog: PricingCatalog = Depends(get_pricing_catalog),
    exporter: DocumentExporter = Depends(get_document_exporter),
):
    """Download the contract as a paginated PDF"""
    session = ContractSession(catalog, data.state)
    with session.exporting() as snapshot:
        pdf_bytes = await exporter.export(snapshot)
    filename = contract_filename(snapshot)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=\"contract.pdf\"; filename*=UTF-8''{quote(filename)}"
        },
    )
