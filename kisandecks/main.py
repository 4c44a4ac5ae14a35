import logging
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Import models so every table is registered with SQLAlchemy Base
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, OTP_STORE_BACKEND, UPLOAD_DIR
from .database import Base, engine
from .domain.account import router as account_router
from .domain.admin import router as admin_router
from .domain.auth import router as auth_router
from .domain.bookings import expert_router as expert_bookings_router
from .domain.bookings import router as bookings_router
from .domain.calculators import router as calculators_router
from .domain.learning import router as learning_router
from .errors import ServiceError
from .otp_store import get_store
from .routes.advisory import router as advisory_router
from .routes.geocoding import router as geocoding_router
from .routes.market import router as market_router
from .routes.weather import router as weather_router

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
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables created successfully")

    if OTP_STORE_BACKEND == "redis":
        try:
            get_store().get("startup:probe")
            logger.info("✅ Redis expiring store reachable")
        except redis.RedisError as e:
            logger.error(f"❌ Redis expiring store unreachable: {e}")
            raise

    swept = get_store().sweep()
    if swept:
        logger.info(f"🧹 Removed {swept} expired records at startup")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="KisanDecks API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Render pydantic validation failures as 400 with the first message,
    in the same {"error", "errorHindi"} shape as service errors
    """
    errors = exc.errors()
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    message = "Invalid request"
    if errors:
        first = errors[0]
        message = str(first.get("msg", message)).removeprefix("Value error, ")
    return JSONResponse(
        status_code=400,
        content={"error": message, "errorHindi": "कृपया दी गई जानकारी जाँचें"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Something went wrong. Please try again.", "errorHindi": "कुछ गलत हो गया। फिर से प्रयास करें।"},
    )


# CORS Configuration
# Cookies carry the session, so origins must be explicit
allowed_origins = [origin.strip() for origin in ALLOWED_ORIGINS.split(",") if origin.strip()]
logger.info(f"CORS allowed origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Range", "Accept-Ranges", "Content-Length", "Content-Disposition", "Retry-After"],
)

# Routes
app.include_router(auth_router)
app.include_router(calculators_router)
app.include_router(bookings_router)
app.include_router(expert_bookings_router)
app.include_router(admin_router)
app.include_router(account_router)
app.include_router(learning_router)
app.include_router(advisory_router)
app.include_router(weather_router)
app.include_router(geocoding_router)
app.include_router(market_router)

app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR), check_dir=False), name="uploads")


@app.get("/")
def root():
    return {"message": "KisanDecks API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
