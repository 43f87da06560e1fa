"""
Classroom Bot API

Main FastAPI application for the classroom assistant Telegram bot.
Receives Telegram updates, runs them through the agent pipeline and
offers direct access to the underlying tools.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings, configure_logging, ConfigurationError
from config.roster import get_roster
from database import init_db, dispose_engine
from agent import close_agent
from api import telegram_router, agent_router, tools_router, groups_router, ErrorResponse

logger = logging.getLogger(__name__)


# --------------- Lifespan ---------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler – configure logging, load the roster, initialise DB."""
    configure_logging()
    roster = get_roster()
    logger.info("Roster loaded with %d student IDs", len(roster))
    if settings.database_url:
        init_db()
        logger.info("Database initialized.")
    else:
        logger.warning("DATABASE_URL is not set; tool calls will fail until it is configured")
    yield
    close_agent()
    dispose_engine()


# --------------- FastAPI app ---------------

app = FastAPI(
    title="Classroom Bot API",
    description="""
API for a classroom assistant Telegram bot.

## Features

### Telegram Webhook
- One reply per incoming message, produced by an LLM agent with tools

### Tools
- Student verification and roster-based registration
- Homework: add, view, delete

### Access Levels
- **student**: view homework of their own group
- **monitor**: + add/delete homework
- **admin**: + view homework of any group
- **owner**: everything
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    """Missing configuration is reported without exposing which setting."""
    logger.error("Configuration error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(detail="Service is not configured").model_dump()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error").model_dump()
    )


# Include routers
error_responses = {
    500: {"model": ErrorResponse, "description": "Internal server error"},
    503: {"model": ErrorResponse, "description": "Service is not configured"},
}
app.include_router(telegram_router, responses=error_responses)
app.include_router(agent_router, responses=error_responses)
app.include_router(tools_router, responses=error_responses)
app.include_router(groups_router, responses=error_responses)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API health check."""
    return {
        "status": "online",
        "service": "Classroom Bot API",
        "version": "1.0.0"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
