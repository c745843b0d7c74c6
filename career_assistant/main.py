"""
Career Assistant - Main Application

FastAPI backend with:
- PostgreSQL for users and profiles
- MongoDB for uploaded documents (extracted text)
- OpenAI-compatible LLM for CV profile extraction
- JWT authentication (tokens issued by the identity provider)

Run: uvicorn career_assistant.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from career_assistant.api.routes import api_router
from career_assistant.core.config import get_settings
from career_assistant.core.errors import PipelineError
from career_assistant.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Career Assistant",
    description="""
    Career assistance backend.

    ## Features
    - **Documents**: CV and cover letter upload (PDF/DOCX) with text extraction
    - **Profile**: Personal profile, enriched automatically from uploaded CVs

    ## Databases
    - PostgreSQL: Structured data (users, profiles)
    - MongoDB: Documents (extracted CV and cover letter text)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    """Render upload/auth errors as {"message": ...} with their status code."""
    if exc.state is not None:
        logger.info("%s %s ended in %s: %s", request.method, request.url.path, exc.state.value, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create PostgreSQL tables and MongoDB indexes on startup."""
    from career_assistant.db.postgres import init_postgres_schema
    from career_assistant.db.mongodb import init_mongo_indexes

    try:
        init_postgres_schema()
        init_mongo_indexes()
    except Exception as e:
        logger.warning("Database initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from career_assistant.db.postgres import test_postgres_connection
    from career_assistant.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
