import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from broker_backend.api.routers import auth, contact, events, news
from broker_backend.core.config import get_settings
from broker_backend.core.logging_config import setup_logging

# --- Application Setup ---
setup_logging()  # Initialize logging first
settings = get_settings()
app = FastAPI(
    title="Broker Site Functions API",
    description="Admin claim sync, contact email proxy and AI news summaries for the brokerage website.",
    version="1.0.0",
)
logger = logging.getLogger(__name__)

# Every endpoint is called from the public website
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception Handlers ---
MISSING_ERROR_TYPES = {"missing", "string_too_short"}

def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Body validation failures are client errors, reported as 400
    missing_only = all(e.get("type") in MISSING_ERROR_TYPES for e in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Missing required fields" if missing_only else "Invalid request body",
            "errors": jsonable_errors(exc),
        },
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

# --- Routers ---
app.include_router(auth.router, prefix="/api/v1", tags=["Admin Claims"])
app.include_router(news.router, prefix="/api/v1", tags=["News"])
app.include_router(contact.router, prefix="/api/v1", tags=["Contact"])
app.include_router(events.router, prefix="/api/v1/events", tags=["Triggers"])

# --- Root Endpoint ---
@app.get("/", tags=["Root"], summary="API Root")
async def read_root():
    """A welcome message to verify the API is running."""
    return {"message": "Broker Site Functions API is running."}

# --- Lifecycle Events ---
@app.on_event("startup")
async def startup_event():
    logger.info("--- Starting FastAPI application ---")
    logger.info(f"Log level set to: {settings.LOG_LEVEL}")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set; news summaries will be empty.")
    if not settings.TRIGGER_SHARED_SECRET:
        logger.warning("TRIGGER_SHARED_SECRET not set; the document event receiver is disabled.")
    logger.info("Application startup complete.")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("--- Shutting down FastAPI application ---")
