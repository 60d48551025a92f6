import logging
import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from deskbook.config import settings
from deskbook.database import init_db
from deskbook.routes.admin import router as admin_router
from deskbook.routes.auth import router as auth_router
from deskbook.routes.daily import router as daily_router
from deskbook.routes.presence import router as presence_router
from deskbook.routes.reservations import desk_router, parking_router
from deskbook.utils.exceptions import AppException
from deskbook.utils.log import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup"""
    if os.getenv("SKIP_DB_INIT") != "1":
        init_db()
        logger.info("database initialized")
    yield
    logger.info("application shutdown")


app = FastAPI(
    title=settings.app_name,
    description="Desk and parking booking API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "ValidationError", "detail": "Invalid request data", "errors": errors},
    )


@app.get("/api/health")
async def health_check():
    """Liveness check"""
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": "1.0.0"
    }


# the daily routes must precede /api/reservations/{reservation_id}
app.include_router(auth_router)
app.include_router(presence_router)
app.include_router(daily_router)
app.include_router(desk_router)
app.include_router(parking_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    return {
        "message": "Desk & Parking Booking API",
        "docs": "/api/docs",
        "openapi": "/api/openapi.json"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "deskbook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
