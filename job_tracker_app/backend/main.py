from dotenv import load_dotenv

load_dotenv()

from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import application, auth, chat, documents, health, job_parser, notifications, resume
from .config.settings import get_settings
from .models.db.database import Base, SessionLocal, engine
from .models.db import application as application_model
from .models.db import document as document_model  # noqa: F401 - registers the table
from .models.db import user as user_model  # noqa: F401 - registers the table
from .services.reminder_scheduler import NotificationFeed, ReminderScheduler
from .utils.api_helpers import error_body
from .utils.logging_config import get_logger, setup_logging

settings = get_settings()

setup_logging(
    level=settings.log_level,
    log_file=settings.log_file
)
logger = get_logger(__name__)

# Validate configuration on startup
missing_settings = settings.validate_required_settings()
if missing_settings:
    for setting in missing_settings:
        logger.error("Configuration error: %s", setting)
    if settings.is_production():
        raise RuntimeError("Invalid configuration for production environment")

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs" if settings.api_docs_enabled else None,
    redoc_url="/redoc" if settings.api_docs_enabled else None,
)

app.state.reminder_scheduler = ReminderScheduler(
    NotificationFeed(),
    day_before=timedelta(hours=settings.reminder_day_before_hours),
    hour_before=timedelta(minutes=settings.reminder_hour_before_minutes),
    enabled=settings.reminders_enabled,
)

if settings.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Routers
app.include_router(health.router, prefix="/api", tags=["Health Check"])
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(application.router, prefix="/api/applications", tags=["Application Tracker"])
app.include_router(documents.router, prefix="/api", tags=["Documents"])
app.include_router(job_parser.router, prefix="/api", tags=["Job Posting Parser"])
app.include_router(chat.router, prefix="/api", tags=["Chat Assistant"])
app.include_router(resume.router, prefix="/api", tags=["Resume"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"error": ..., "details": ...}."""
    return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=exc.headers)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Anything not raised as an HTTP error (database failures included) becomes a 500 in the same shape."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred", "details": str(exc) or type(exc).__name__},
    )


@app.on_event("startup")
def on_startup():
    """Create tables and re-arm reminders for interviews that are still ahead."""
    logger.info("Starting Job Application Tracker...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")

    if not settings.reminders_enabled:
        return
    db = SessionLocal()
    try:
        scheduled = 0
        for db_application in db.query(application_model.Application).filter(
            application_model.Application.interview_date.isnot(None)
        ).all():
            scheduled += app.state.reminder_scheduler.schedule(db_application)
        logger.info("Re-armed %d interview reminder(s)", scheduled)
    finally:
        db.close()


@app.on_event("shutdown")
def on_shutdown():
    app.state.reminder_scheduler.shutdown()
    logger.info("Job Application Tracker stopped")


@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.app_name} API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=settings.is_development())
