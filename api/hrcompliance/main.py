"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from hrcompliance.api import compliance, compliance_overrides
from hrcompliance.core.config import settings
from hrcompliance.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="HR Compliance Service", version="1.0.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(compliance.router, prefix="/compliance", tags=["compliance"])
# Supervisor-granted exceptions to compliance blocks
app.include_router(compliance_overrides.router,
                   prefix="/compliance", tags=["compliance-overrides"])


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Errors escaping a route (e.g. during dependency resolution) still fail closed."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return compliance.failed_closed_response(compliance.INTERNAL_ERROR_MESSAGE)


@app.get("/health")
def health_check():
    return {"status": "ok"}
