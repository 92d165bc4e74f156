import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Frontend page that receives shared contracts (?data=...)
SHARE_BASE_URL = os.getenv("SHARE_BASE_URL", "http://localhost:5173/")
# Upper bound on a decompressed share payload
SHARE_MAX_BYTES = int(os.getenv("SHARE_MAX_BYTES", "1048576"))

# Pricing / display
CURRENCY_SUFFIX = os.getenv("CURRENCY_SUFFIX", "원")
STUDIO_NAME = os.getenv("STUDIO_NAME", "Yuar Snap (유아르 스냅)")
# Optional JSON file replacing the built-in pricing catalog
PRICING_CATALOG_PATH = os.getenv("PRICING_CATALOG_PATH")

# Layout - 297mm at 96 DPI is approx 1122.5px
PAGE_HEIGHT_PX = float(os.getenv("PAGE_HEIGHT_PX", "1122.5"))
PAGE_BREAK_BUFFER_PX = float(os.getenv("PAGE_BREAK_BUFFER_PX", "10"))

# Export worker (Playwright / Chromium)
EXPORT_TIMEOUT_SECONDS = int(os.getenv("EXPORT_TIMEOUT_SECONDS", "120"))
EXPORT_DEVICE_SCALE = float(os.getenv("EXPORT_DEVICE_SCALE", "2"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
