import asyncio
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crud.mountain import MountainStore, get_store
from exceptions import (
    GENERIC_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    MountainNotFoundError,
    QueryValidationError,
    StoreError,
)
from routers import mountains

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler()],
)
log = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Mountix API")

# CORS設定 - 全てのオリジンを許可（読み取り専用）
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(mountains.router)


# ============================================
# Exception handlers
# ============================================
@app.exception_handler(QueryValidationError)
async def query_validation_error_handler(request: Request, exc: QueryValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"messages": exc.messages},
    )


@app.exception_handler(MountainNotFoundError)
async def mountain_not_found_handler(request: Request, exc: MountainNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": NOT_FOUND_MESSAGE},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    log.error(f"Store error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": GENERIC_ERROR_MESSAGE},
    )


@app.exception_handler(asyncio.TimeoutError)
async def timeout_handler(request: Request, exc: asyncio.TimeoutError):
    log.warning(f"Request timed out: {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content={"message": GENERIC_ERROR_MESSAGE},
    )


@app.get("/")
async def root():
    return {"message": "Mountix API"}


@app.get("/health")
async def health_check(store: MountainStore = Depends(get_store)):
    """Database connection health check"""
    try:
        await asyncio.to_thread(store.ping)
        return {"status": "healthy", "database": "connected"}
    except StoreError as e:
        return {"status": "unhealthy", "database": "disconnected", "error": str(e)}
