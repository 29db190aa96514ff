from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import intake

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("estimate_intake")

app = FastAPI(
    title=settings.APP_NAME,
    description="Construction estimate intake: question rules, completion and measurements",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(intake.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "estimate-intake"}


@app.on_event("startup")
def preload_templates():
    """Load the default template so a broken JSON file fails at startup, not mid-wizard."""
    intake.engine.load_template(settings.DEFAULT_TEMPLATE_ID)
    logger.info("Available templates: %s", intake.engine.list_available_templates())
