import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .analytics.router import router as analytics_router
from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.admin.router import router as admin_router
from .domain.booking.router import router as booking_router
from .domain.contact.router import router as contact_router
from .domain.leads.router import router as leads_router
from .routes.health import router as health_router
from .shared.validators import pydantic_errors_to_details

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# Top-level error text per form; everything else uses the generic one
VALIDATION_MESSAGES = {
    "/api/booking": "Please check your booking information.",
}
DEFAULT_VALIDATION_MESSAGE = "Please check your form data."


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🐾 Pupperazi API starting")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except SQLAlchemyError as e:
        # Several workers may race to create the same tables
        if "already exists" not in str(e):
            logger.error(f"❌ Could not create tables: {e}")
    else:
        logger.info("✅ Tables ready")

    yield
    logger.info("Pupperazi API stopped")


app = FastAPI(title="Pupperazi Pet Spa API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report body validation failures as 400 with one entry per failing field"""
    details = pydantic_errors_to_details(exc)
    logger.warning(f"Validation error for {request.url.path}: {[d['field'] for d in details]}")
    return JSONResponse(
        status_code=400,
        content={
            "error": VALIDATION_MESSAGES.get(request.url.path, DEFAULT_VALIDATION_MESSAGE),
            "details": details,
        },
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} crashed: {e}")
        raise
    elapsed_ms = round((time.perf_counter() - started) * 1000)
    if response.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)")
    return response


logger.info(f"🌐 CORS origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(leads_router)
app.include_router(contact_router)
app.include_router(booking_router)
app.include_router(analytics_router)
app.include_router(admin_router)
app.include_router(health_router)


@app.get("/")
def root():
    return {"message": "Pupperazi Pet Spa API is running"}
