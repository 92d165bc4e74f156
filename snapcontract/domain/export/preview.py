"""
Contract preview - renders a ContractState as the printable A4 document

Every unit that must not be split across pages carries a data-atomic
attribute; the export worker measures exactly those elements.
"""

import re
from datetime import date, datetime
from typing import List, Optional

from ...config import STUDIO_NAME
from ...utils.sanitization import sanitize_image_src, sanitize_multiline, sanitize_string
from ..contracts.state import ContractState
from ..pricing.catalog import NO_OPTION_KEY, PricingCatalog
from ..pricing.engine import format_price, to_number

PREVIEW_ELEMENT_ID = "contract-preview"
ATOMIC_ATTR = "data-atomic"

KOREAN_WEEKDAYS = ["월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일"]

# Placeholder articles; the full legal text is supplied separately
CONTRACT_ARTICLES = [
    (
        "제 1 조 [계약의 목적]",
        '본 계약은 "촬영자"(이하 "갑"이라 한다)와 "계약자"(이하 "을"이라 한다) 간의 웨딩 스냅 촬영 '
        "용역 제공 및 이에 따른 대금 지급에 관한 제반 사항을 규정함을 목적으로 한다.",
    ),
    (
        "제 2 조 [촬영의 범위]",
        "갑은 을이 예약한 예식 일시와 장소에서 계약된 상품 구성에 따라 촬영을 진행한다.",
    ),
    (
        "제 3 조 [대금 지급]",
        "을은 갑에게 계약금과 잔금을 정해진 기일 내에 지급하여야 한다.",
    ),
    (
        "제 4 조 [환불 규정]",
        "예식일 기준 90일 전 취소 시 계약금 전액 환불, 그 이후는 환불 불가하다.",
    ),
]

CONTRACT_CSS = """
@page { size: A4; margin: 0; }
* { box-sizing: border-box; }
body { margin: 0; background: #ffffff; font-family: 'Noto Sans KR', 'Apple SD Gothic Neo', sans-serif; color: #1e293b; }
.contract-paper { position: relative; width: 210mm; padding: 20mm; background: #ffffff; }
.watermark-container { position: absolute; inset: 0; display: flex; align-items: center; justify-content: center; opacity: 0.08; pointer-events: none; }
.watermark-img { max-width: 60%; }
.page-divider-layer { position: absolute; inset: 0; pointer-events: none; }
.page-divider { position: absolute; left: 0; right: 0; border-top: 1px dashed #94a3b8; }
.contract-header { text-align: center; margin-bottom: 24px; }
.title { font-size: 26px; letter-spacing: 2px; margin: 0 0 6px; }
.subtitle { margin: 0; color: #64748b; }
.info-table { width: 100%; border-collapse: collapse; margin-bottom: 24px; font-size: 13px; }
.info-table th, .info-table td { border: 1px solid #cbd5e1; padding: 8px 10px; text-align: left; vertical-align: top; }
.info-table th { width: 18%; background: #f1f5f9; white-space: nowrap; }
.info-table ul { margin: 4px 0 0; padding-left: 18px; }
.total-row td { font-weight: 700; font-size: 15px; }
.contract-body h3 { font-size: 14px; margin: 16px 0 6px; }
.contract-body p { font-size: 13px; line-height: 1.7; margin: 0; }
.placeholder-note { margin-top: 16px; font-size: 11px; color: #94a3b8; }
.contract-footer { margin-top: 32px; font-size: 13px; }
.signature-section { display: flex; justify-content: space-between; gap: 24px; }
.signature-block { display: flex; align-items: center; gap: 8px; }
.signature-img { height: 48px; }
.date-signed { text-align: right; margin-top: 16px; color: #475569; }
"""


def format_wedding_date(value: Optional[str]) -> str:
    """2025-05-17 -> 2025년 5월 17일 토요일; unparseable input is shown as typed"""
    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return value
    return f"{parsed.year}년 {parsed.month}월 {parsed.day}일 {KOREAN_WEEKDAYS[parsed.weekday()]}"


def format_signed_date(today: Optional[date] = None) -> str:
    today = today or datetime.now().date()
    return f"{today.year}. {today.month}. {today.day}."


def contract_filename(state: ContractState) -> str:
    """contract_<contractor name or draft>.pdf, safe for a Content-Disposition header"""
    name = re.sub(r'[\\/:*?"<>|\r\n]+', "_", state.contractorName.strip()) or "draft"
    return f"contract_{name}.pdf"


def _atomic(tag: str, inner: str, css_class: str = "") -> str:
    class_attr = f' class="{css_class}"' if css_class else ""
    return f"<{tag}{class_attr} {ATOMIC_ATTR}>{inner}</{tag}>"


def _signed_amount(price, sign) -> str:
    amount = int(round(to_number(price) * (to_number(sign) or 1)))
    formatted = format_price(amount)
    return formatted if amount < 0 else f"+{formatted}"


def _options_cell(state: ContractState, catalog: PricingCatalog) -> str:
    """Predefined option plus named custom items; each line is its own atomic block"""
    parts: List[str] = []

    option = catalog.options.get(state.options)
    if option and state.options != NO_OPTION_KEY:
        parts.append(_atomic("div", sanitize_string(option.label)))

    if state.hasCustomOption:
        items = [
            _atomic(
                "li",
                f"{sanitize_string(custom.name)} ({_signed_amount(custom.price, custom.sign)})",
            )
            for custom in state.customOptions
            if custom.name.strip()
        ]
        if items:
            parts.append(f"<ul>{''.join(items)}</ul>")

    return "".join(parts)


def _package_label(state: ContractState, catalog: PricingCatalog) -> str:
    package = catalog.packages.get(state.packageConfig)
    if package:
        return sanitize_string(package.label)
    return sanitize_multiline(state.packageConfig)


def render_contract_html(
    state: ContractState,
    catalog: PricingCatalog,
    page_dividers: int = 0,
    page_height_mm: float = 297,
    signed_on: Optional[date] = None,
) -> str:
    """Full HTML document for the contract; page_dividers draws preview-only page lines"""
    discounts = ", ".join(
        sanitize_string(d.label) for d in catalog.ordered_discounts(state.discountItems)
    )
    wedding_when = sanitize_string(f"{format_wedding_date(state.weddingDate)} {state.weddingTime}".strip())

    watermark = ""
    logo_src = sanitize_image_src(state.logoImage)
    if logo_src:
        watermark = (
            '<div class="watermark-container">'
            f'<img src="{logo_src}" alt="Watermark" class="watermark-img"></div>'
        )

    dividers = ""
    if page_dividers > 0:
        lines = "".join(
            f'<div class="page-divider" style="top: {page_height_mm * n}mm"></div>'
            for n in range(1, page_dividers + 1)
        )
        dividers = f'<div class="page-divider-layer">{lines}</div>'

    signature_src = sanitize_image_src(state.signature)
    client_sign = (
        f'<img src="{signature_src}" alt="Signature" class="signature-img">'
        if signature_src
        else '<span class="sign-space">(인)</span>'
    )

    rows = [
        _atomic(
            "tr",
            f"<th>계약자</th><td>{sanitize_string(state.contractorName)}</td>"
            f"<th>연락처</th><td>{sanitize_string(state.contact)}</td>",
        ),
        _atomic("tr", f'<th>예식일시</th><td colspan="3">{wedding_when}</td>'),
        _atomic("tr", f'<th>예식장</th><td colspan="3">{sanitize_string(state.venue)}</td>'),
        _atomic(
            "tr",
            f'<th>상품구성</th><td colspan="3" class="multi-line">{_package_label(state, catalog)}</td>',
        ),
        # Not atomic itself: the option lines inside move independently
        f'<tr><th>추가옵션</th><td colspan="3" class="multi-line">{_options_cell(state, catalog)}</td></tr>',
        _atomic("tr", f'<th>할인항목</th><td colspan="3" class="multi-line">{discounts}</td>'),
        _atomic(
            "tr",
            f'<th>최종가격</th><td colspan="3">{sanitize_string(state.finalPrice)}</td>',
            css_class="total-row",
        ),
    ]

    header = _atomic(
        "header",
        '<h1 class="title">WEDDING SNAP CONTRACT</h1>'
        f'<p class="subtitle">{sanitize_string(STUDIO_NAME)}</p>',
        css_class="contract-header",
    )
    placeholder = _atomic(
        "div", "(This is a placeholder for the full contract terms.)", css_class="placeholder-note"
    )
    signatures = _atomic(
        "div",
        '<div class="signature-block"><span>촬영자 (갑):</span>'
        f'<span class="signer-name">{sanitize_string(STUDIO_NAME)}</span>'
        '<span class="sign-space">(인)</span></div>'
        '<div class="signature-block"><span>계약자 (을):</span>'
        f'<span class="signer-name">{sanitize_string(state.contractorName)}</span>'
        f"{client_sign}</div>",
        css_class="signature-section",
    )
    signed_date = _atomic("p", f"{format_signed_date(signed_on)} 작성", css_class="date-signed")
    table = f'<table class="info-table"><tbody>{"".join(rows)}</tbody></table>'

    articles = "".join(
        _atomic("section", f"<h3>{title}</h3><p>{text}</p>", css_class="article")
        for title, text in CONTRACT_ARTICLES
    )

    return f"""<!DOCTYPE html>
<html lang="ko">
<head>
<meta charset="utf-8">
<title>Wedding Snap Contract</title>
<style>{CONTRACT_CSS}</style>
</head>
<body>
<div class="contract-paper" id="{PREVIEW_ELEMENT_ID}">
{watermark}{dividers}
<div class="contract-content">
{header}
{table}
<div class="contract-body">
{articles}
{placeholder}
</div>
<footer class="contract-footer">
{signatures}
{signed_date}
</footer>
</div>
</div>
</body>
</html>
"""
