"""
FastAPI application initialization
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, assessments
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.exceptions import ImpactEngineError
from core.logging import setup_logging
from schemas.api import ErrorResponse
import logging
import uvicorn

setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Metal LCA Impact Engine API",
    description="Estimates missing process data and aggregates environmental impacts for metal LCA assessments",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health.router)
app.include_router(assessments.router)


@app.exception_handler(ImpactEngineError)
async def engine_error_handler(request: Request, exc: ImpactEngineError):
    """Render engine errors with their stable code and HTTP status"""
    request_id = getattr(request.state, "request_id", None)
    
    if exc.status_code >= 500:
        logger.error(f"[{request_id}] {exc}", extra={"error_context": exc.to_dict()})
    else:
        logger.warning(f"[{request_id}] {exc.code}: {exc.message}")
    
    body = ErrorResponse(
        error=exc.message,
        code=exc.code,
        context=exc.context,
        request_id=request_id
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Metal LCA Impact Engine API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Metal LCA Impact Engine API")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Metal LCA Impact Engine API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "estimate": "/assessments/{assessment_id}/estimate",
            "calculate": "/assessments/{assessment_id}/calculate"
        }
    }


if __name__ == "__main__":
    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)
