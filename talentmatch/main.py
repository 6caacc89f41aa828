from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from talentmatch.config import get_settings, setup_logging
from talentmatch.exceptions import PipelineError
from talentmatch.routes.jobs import router as jobs_router
from talentmatch.routes.candidates import router as candidates_router
from talentmatch.routes.interviews import router as interviews_router

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        json_output=settings.is_production,
        log_file=settings.log_file
    )
    logger.info(f"Starting TalentMatch API ({settings.environment})")
    yield
    logger.info("Shutting down TalentMatch API")

app = FastAPI(
    title="TalentMatch API",
    description="AI scoring of candidates against jobs and of interview answers",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Errors raised while resolving dependencies never reach the route handlers
@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

app.include_router(jobs_router)
app.include_router(candidates_router)
app.include_router(interviews_router)

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
