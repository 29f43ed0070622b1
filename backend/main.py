from fastapi import FastAPI, Request
from dotenv import load_dotenv

load_dotenv()
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import Base, engine
from contextlib import asynccontextmanager
from datetime import datetime
from exceptions import AppError, ConflictError, InternalError, ValidationError
from scheduler import scheduler
import models  # noqa: F401  registers every table on Base.metadata
import routers.auth as auth
import routers.cattle as cattle
import routers.dashboard as dashboard
import routers.feed as feed
import routers.health as health
import routers.milk as milk
import routers.users as users
import os
import re
import logging


LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
os.makedirs(LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE, # Log to a file
    filemode='a' # Append to the file if it exists
)

# Also log to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler) # Add to the root logger

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


SCHEDULER_ENABLED = os.getenv("ENABLE_SCHEDULER", "false").lower() in ("1", "true", "yes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if SCHEDULER_ENABLED:
        scheduler.start()
        logger.info("Daily summary scheduler started")
    yield
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Daily summary scheduler stopped")


app = FastAPI(
    title="Cattle Farm Management API",
    version="1.0.0",
    description="API for the Cattle Farm Management System",
    lifespan=lifespan,
)


allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000"
)

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',') if origin.strip()]

# Credentials are required for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handling ---

def _field_label(loc) -> str:
    """Turn a pydantic location such as ('body', 'cattleId') into 'Cattle ID'."""
    name = str(loc[-1])
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", name.replace("_", " ")).split()
    words = ["ID" if w.lower() == "id" else w.capitalize() for w in words]
    return " ".join(words)


def _validation_message(error: dict) -> str:
    loc = error.get("loc") or ()
    if error.get("type") == "missing":
        if len(loc) <= 1:
            return "Invalid request body"
        return f"{_field_label(loc)} is required"
    message = error.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    if len(loc) > 1:
        return f"{_field_label(loc)}: {message}"
    return "Invalid request body"


def _error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = _validation_message(errors[0]) if errors else "Invalid request"
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
    return _error_response(ValidationError(message, details=details))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"{request.method} {request.url.path} violated a constraint: {exc.orig}")
    return _error_response(ConflictError("Conflict with existing data"))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(InternalError("Internal server error"))


app.include_router(auth.router)
app.include_router(cattle.router)
app.include_router(milk.router)
app.include_router(health.router)
app.include_router(feed.router)
app.include_router(users.router)
app.include_router(dashboard.router)


@app.get("/")
async def test_route():
    return {"message": "Welcome to the Cattle Farm Management API!"}
