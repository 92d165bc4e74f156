import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS, PRICING_CATALOG_PATH
from .domain.contracts.router import router as contracts_router
from .domain.contracts.session import new_contract_state
from .domain.export.router import router as export_router
from .domain.pricing.catalog import get_catalog
from .domain.share.link import MODE_AUTHORING
from .domain.share.router import router as share_router
from .errors import ExportFailure, ExportInProgress, ShareLinkError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    catalog = get_catalog()
    logger.info(
        f"Pricing catalog ready ({'file ' + PRICING_CATALOG_PATH if PRICING_CATALOG_PATH else 'built-in'}): "
        f"{len(catalog.packages)} packages, {len(catalog.discounts)} discounts"
    )
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Snap Contract API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(ShareLinkError)
async def share_link_exception_handler(request: Request, exc: ShareLinkError):
    """
    Reject the inbound link and hand back a fresh authoring state so the
    caller never ends up with a half-populated contract.
    """
    logger.warning(f"Rejected share link on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": exc.detail,
            "error": type(exc).__name__,
            "mode": MODE_AUTHORING,
            "state": new_contract_state(get_catalog()).model_dump(),
        },
    )


@app.exception_handler(ExportFailure)
async def export_failure_handler(request: Request, exc: ExportFailure):
    logger.error(f"Export failed on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=502,
        content={"detail": ExportFailure.detail, "error": type(exc).__name__},
    )


@app.exception_handler(ExportInProgress)
async def export_in_progress_handler(request: Request, exc: ExportInProgress):
    return JSONResponse(status_code=409, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(contracts_router)
app.include_router(share_router)
app.include_router(export_router)


@app.get("/health")
def health():
    return {"status": "healthy"}
