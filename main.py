import logging
from contextlib import asynccontextmanager
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from core.config import CORS_ORIGIN_REGEX, FRONTEND_URL, STORAGE_BACKEND, TRANSIENT_TTL_SECONDS
from core.errors import AdminRequired, LoginRequired, StorageError
from core.logging_config import setup_logging
from core.session import session_middleware
from core.storage import MemoryStorage, create_storage
from routers import router as api_router
from services.api_client import create_http_session

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    app.state.http = create_http_session()
    app.state.storage = create_storage(STORAGE_BACKEND)
    app.state.transient = MemoryStorage(ttl_seconds=TRANSIENT_TTL_SECONDS)
    app.state.checkout_in_flight = set()
    logger.info("Storefront started (storage=%s)", STORAGE_BACKEND)
    try:
        yield
    finally:
        await app.state.http.close()


app = FastAPI(
    title="Tailoring Storefront",
    description="Storefront and admin console for made-to-order and ready-made clothing",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=CORS_ORIGIN_REGEX,
    allow_credentials=True,    # session and auth cookies
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(session_middleware)

app.include_router(api_router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(url=f"{FRONTEND_URL}/login?next={quote(exc.next_path)}", status_code=303)


@app.exception_handler(AdminRequired)
async def admin_required_handler(request: Request, exc: AdminRequired):
    return RedirectResponse(url=f"{FRONTEND_URL}/", status_code=303)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=503, content={"detail": "Storage is temporarily unavailable"})


@app.get("/")
async def root():
    return {"message": "Tailoring storefront is running"}
