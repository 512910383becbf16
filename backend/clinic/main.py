import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .database import SessionLocal
from .exceptions import SchedulingError
from .redis_client import redis_client
from .routers import appointments, providers, scheduler, slots, treatment_plans

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def scheduling_error_handler(request: Request, exc: SchedulingError):
    logger.warning(f"{request.method} {request.url.path} -> {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(title="Panchakarma Clinic Scheduling API")

    app.add_exception_handler(SchedulingError, scheduling_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(slots.router)
    app.include_router(scheduler.router)
    app.include_router(treatment_plans.router)
    app.include_router(appointments.router)
    app.include_router(providers.router)

    @app.get("/health")
    def health():
        return {"database": _database_ok(), "redis": _redis_ok()}

    return app


def _database_ok() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return False
    finally:
        db.close()


def _redis_ok() -> bool:
    try:
        return bool(redis_client.ping())
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


app = create_app()
