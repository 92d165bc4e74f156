"""
Standalone contract rasterization worker.
Runs as a separate process (python -m snapcontract.export_worker) to keep
Playwright away from the API event loop.

stdin:  JSON {"html", "pageHeight", "buffer", "deviceScale"}
stdout: base64 PNG of the page-safe contract render
"""

import base64
import json
import sys

from playwright.sync_api import sync_playwright

from .domain.export.preview import ATOMIC_ATTR, PREVIEW_ELEMENT_ID
from .domain.layout.page_break import plan_page_breaks

# 210mm at 96 DPI
VIEWPORT_WIDTH = 794
VIEWPORT_HEIGHT = 1123

MEASURE_BLOCKS_JS = """
([rootId, attr]) => {
    const root = document.getElementById(rootId);
    const rootTop = root.getBoundingClientRect().top;
    return Array.from(root.querySelectorAll(`[${attr}]`)).map((el) => {
        const rect = el.getBoundingClientRect();
        return { top: rect.top - rootTop, height: rect.height };
    });
}
"""

# Padding instead of margin: margins collapse with the previous sibling and would
# under-shift. Table rows cannot take either, so a spacer row goes in front.
APPLY_MARGINS_JS = """
([rootId, attr, margins]) => {
    const root = document.getElementById(rootId);
    const blocks = Array.from(root.querySelectorAll(`[${attr}]`));
    blocks.forEach((el, index) => {
        const extra = margins[index];
        if (!extra) return;
        if (el.tagName === 'TR') {
            const spacer = document.createElement('tr');
            const cell = document.createElement('td');
            cell.colSpan = 4;
            cell.style.cssText = `height:${extra}px;padding:0;border:none;background:transparent;`;
            spacer.appendChild(cell);
            el.parentNode.insertBefore(spacer, el);
        } else {
            const current = parseFloat(getComputedStyle(el).paddingTop) || 0;
            el.style.paddingTop = `${current + extra}px`;
        }
    });
}
"""

WAIT_FOR_RESOURCES_JS = """
async () => {
    await document.fonts.ready;
    await Promise.all(Array.from(document.images).map((img) => img.complete
        ? Promise.resolve()
        : new Promise((resolve) => { img.onload = resolve; img.onerror = resolve; })));
    return true;
}
"""


def render_page_safe_png(html: str, page_height: float, buffer: float, device_scale: float) -> bytes:
    """Measure atomic blocks, push straddling ones to the next page, screenshot the result"""
    with sync_playwright() as p:
        browser = p.chromium.launch()
        try:
            page = browser.new_page(
                viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT},
                device_scale_factor=device_scale,
            )
            page.set_content(html, wait_until="networkidle")
            page.evaluate(WAIT_FOR_RESOURCES_JS)

            blocks = page.evaluate(MEASURE_BLOCKS_JS, [PREVIEW_ELEMENT_ID, ATOMIC_ATTR])
            plan = plan_page_breaks(blocks, page_height=page_height, buffer=buffer)
            if plan.moved_blocks:
                page.evaluate(APPLY_MARGINS_JS, [PREVIEW_ELEMENT_ID, ATOMIC_ATTR, plan.margins])
            sys.stderr.write(
                f"measured {len(blocks)} blocks, moved {len(plan.moved_blocks)}, "
                f"shift {plan.total_shift:.1f}px\n"
            )

            return page.locator(f"#{PREVIEW_ELEMENT_ID}").screenshot(type="png")
        finally:
            browser.close()


if __name__ == "__main__":
    request = json.loads(sys.stdin.read())

    png_bytes = render_page_safe_png(
        request["html"],
        page_height=float(request["pageHeight"]),
        buffer=float(request["buffer"]),
        device_scale=float(request.get("deviceScale", 2)),
    )

    sys.stdout.write(base64.b64encode(png_bytes).decode("utf-8"))
