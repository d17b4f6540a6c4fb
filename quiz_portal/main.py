"""
Quiz Portal API - Main Application
FILE: quiz_portal/main.py
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import time

from quiz_portal.core.config import settings
from quiz_portal.db.mongodb import connect_to_mongo, close_mongo_connection, mongodb
from quiz_portal.api.admin import router as admin_router
from quiz_portal.api.participant import router as participant_router

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup
    logger.info("🚀 Starting Quiz Portal API...")

    try:
        await connect_to_mongo()
        logger.info("✓ MongoDB connected")
    except Exception as e:
        logger.error(f"❌ Startup error: {e}")
        raise

    yield

    # Shutdown
    logger.info("🛑 Shutting down Quiz Portal API...")
    await close_mongo_connection()
    logger.info("✓ Cleanup complete")


app = FastAPI(
    title="Quiz Portal API",
    description="""
    Multiple-choice quizzes with access-code sessions and scoring.

    ## Endpoints
    - **Admin**: `/api/admin/quizzes/*` - create, edit, delete and list quizzes with statistics
    - **Participant**: `/api/start-quiz`, `/api/quiz/{accessCode}`, `/api/submit-answer`, `/api/submit-quiz`
    - **Health**: `/health` - MongoDB connectivity check
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers"""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000  # Convert to ms
    response.headers["X-Process-Time-Ms"] = str(round(process_time, 2))
    return response


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    logger.info(f"📨 {request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(
        f"📤 {request.method} {request.url.path} - "
        f"Status: {response.status_code}"
    )
    return response


# ==================== ERROR RESPONSES ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as {"error": message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400)"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", message)

    logger.warning(f"⚠️ {request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# ==================== INCLUDE ROUTERS ====================

app.include_router(admin_router, prefix=settings.api_prefix, tags=["Admin"])
app.include_router(participant_router, prefix=settings.api_prefix, tags=["Participant"])


# ==================== ROOT ENDPOINTS ====================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Quiz Portal API",
        "version": app.version,
        "status": "operational",
        "endpoints": {
            "docs": "/docs",
            "admin": f"{settings.api_prefix}/admin/quizzes",
            "start_quiz": f"{settings.api_prefix}/start-quiz",
            "health": "/health"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check for the API and its MongoDB connection

    Returns:
        200 when MongoDB answers a ping, 503 otherwise
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "components": {}
    }

    try:
        if mongodb.client is None:
            raise RuntimeError("MongoDB client is not connected")
        await mongodb.client.admin.command("ping")
        health_status["components"]["mongodb"] = {
            "status": "healthy",
            "message": "Connected and responsive"
        }
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["components"]["mongodb"] = {
            "status": "unhealthy",
            "message": str(e)
        }
        logger.error(f"❌ MongoDB health check failed: {e}")

    health_status["api"] = {
        "title": app.title,
        "version": app.version,
        "status": "operational"
    }

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(status_code=status_code, content=health_status)


# ==================== RUN APPLICATION ====================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "quiz_portal.main:app",
        host="0.0.0.0",
        port=5000,
        reload=True,
        log_level="info"
    )
