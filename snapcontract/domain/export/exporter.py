"""
Document exporter - turns a contract snapshot into a downloadable PDF

1. inline a remote logo (Chromium in the worker gets no network access to it)
2. render the preview HTML
3. worker process: measure atomic blocks, apply page-break margins, screenshot
4. slice the continuous image onto A4 pages with reportlab

The authoring state is never modified; any failure surfaces as ExportFailure.
"""

import asyncio
import base64
import io
import json
import logging
import subprocess
import sys
from typing import List, Optional

import httpx
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ...config import (
    EXPORT_DEVICE_SCALE,
    EXPORT_TIMEOUT_SECONDS,
    PAGE_BREAK_BUFFER_PX,
    PAGE_HEIGHT_PX,
)
from ...errors import ExportFailure
from ..contracts.state import ContractState
from ..pricing.catalog import PricingCatalog
from .preview import render_contract_html

logger = logging.getLogger(__name__)

# Prevents an empty trailing page caused by rounding
PAGE_TOLERANCE = 1 * mm


async def download_image_as_base64(url: str) -> Optional[str]:
    """
    Download an image and return it as a data URL.
    Returns None when the download fails; the export continues without the image.
    """
    if not url:
        return None

    try:
        async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()

            content_type = response.headers.get("content-type", "image/png")
            if ";" in content_type:
                content_type = content_type.split(";")[0].strip()

            image_bytes = response.content
            if len(image_bytes) == 0:
                logger.warning("⚠️ Downloaded image has 0 bytes")
                return None
            b64_encoded = base64.b64encode(image_bytes).decode("utf-8")
            return f"data:{content_type};base64,{b64_encoded}"
    except httpx.HTTPStatusError as e:
        logger.error(f"❌ HTTP error downloading image: {e.response.status_code} - {e}")
        return None
    except httpx.RequestError as e:
        logger.error(f"❌ Request error downloading image: {e}")
        return None
    except httpx.InvalidURL as e:
        logger.error(f"❌ Invalid image URL: {e}")
        return None


def page_offsets(image_height: float, page_height: float, tolerance: float = PAGE_TOLERANCE) -> List[float]:
    """Vertical offset of each page slice within the continuous image"""
    offsets = [0.0]
    height_left = image_height - page_height
    while height_left >= tolerance:
        offsets.append(len(offsets) * page_height)
        height_left -= page_height
    return offsets


def paginate_image_to_pdf(png_bytes: bytes) -> bytes:
    """Place the continuous render on as many A4 pages as it needs"""
    image = ImageReader(io.BytesIO(png_bytes))
    width_px, height_px = image.getSize()

    page_width, page_height = A4
    image_width = page_width
    image_height = height_px * image_width / width_px

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle("Wedding Snap Contract")

    for offset in page_offsets(image_height, page_height):
        # reportlab's origin is bottom-left: shift the image up by the slice offset
        y = page_height - image_height + offset
        pdf.drawImage(image, 0, y, width=image_width, height=image_height)
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


class DocumentExporter:
    """Renders, paginates and rasterizes a contract snapshot"""

    def __init__(
        self,
        catalog: PricingCatalog,
        page_height: float = PAGE_HEIGHT_PX,
        buffer: float = PAGE_BREAK_BUFFER_PX,
        device_scale: float = EXPORT_DEVICE_SCALE,
        timeout: int = EXPORT_TIMEOUT_SECONDS,
    ):
        self.catalog = catalog
        self.page_height = page_height
        self.buffer = buffer
        self.device_scale = device_scale
        self.timeout = timeout

    def _run_worker(self, html: str) -> bytes:
        request = json.dumps(
            {
                "html": html,
                "pageHeight": self.page_height,
                "buffer": self.buffer,
                "deviceScale": self.device_scale,
            }
        )
        try:
            result = subprocess.run(
                [sys.executable, "-m", "snapcontract.export_worker"],
                input=request,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                creationflags=subprocess.CREATE_NO_WINDOW if sys.platform == "win32" else 0,
            )
        except subprocess.TimeoutExpired as e:
            raise ExportFailure(f"Export timed out after {self.timeout} seconds") from e

        if result.returncode != 0:
            raise ExportFailure(f"Export worker failed (exit {result.returncode}): {result.stderr}")
        if result.stderr:
            logger.info(f"📐 Export worker: {result.stderr.strip()}")

        png_b64 = result.stdout.strip()
        if not png_b64:
            raise ExportFailure("Export worker returned empty output")
        return base64.b64decode(png_b64)

    async def rasterize(self, html: str) -> bytes:
        """Page-safe PNG of the contract (worker runs in a thread pool)"""
        return await asyncio.to_thread(self._run_worker, html)

    async def export(self, state: ContractState) -> bytes:
        logger.info(f"📄 Exporting contract for '{state.contractorName or 'draft'}'")
        try:
            snapshot = state
            if state.logoImage and state.logoImage.startswith(("http://", "https://")):
                logo = await download_image_as_base64(state.logoImage)
                snapshot = state.model_copy(update={"logoImage": logo})

            html = render_contract_html(snapshot, self.catalog)
            png_bytes = await self.rasterize(html)
            pdf_bytes = paginate_image_to_pdf(png_bytes)
        except ExportFailure:
            logger.error("❌ Contract export failed", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"❌ Contract export failed: {type(e).__name__}: {e}")
            raise ExportFailure(f"PDF generation error: {e}") from e

        logger.info(f"✅ Exported contract PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes
