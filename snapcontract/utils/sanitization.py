import html
import re
from typing import Optional

_IMAGE_DATA_URL = re.compile(r"^data:image/(png|jpe?g|gif|webp|svg\+xml);base64,[A-Za-z0-9+/=\s]+$")


def sanitize_string(value: Optional[str]) -> str:
    """
    Escape HTML special characters so user text can be placed in the contract markup.
    Returns an empty string for None.
    """
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def sanitize_multiline(value: Optional[str]) -> str:
    """Escape text and keep the operator's line breaks"""
    return sanitize_string(value).replace("\r\n", "\n").replace("\n", "<br>")


def sanitize_image_src(value: Optional[str]) -> Optional[str]:
    """
    Allow only base64 image data URLs or http(s) URLs as <img src>.

    Returns:
        Escaped src value, or None if the value is not an acceptable image source
    """
    if not value:
        return None

    value = value.strip()
    if _IMAGE_DATA_URL.match(value) or value.startswith(("https://", "http://")):
        return html.escape(value, quote=True)
    return None
