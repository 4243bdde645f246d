# eventhub/main.py
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.api.routes import auth
from eventhub.api.routes import availability as availability_router
from eventhub.api.routes import bookings as bookings_router
from eventhub.api.routes import broadcasts as broadcasts_router
from eventhub.api.routes import reviews as reviews_router
from eventhub.api.routes import services as services_router
from eventhub.api.routes import users as users_router
from eventhub.core import config
from eventhub.core.exceptions import BookingPlatformError
from eventhub.db.base import SessionLocal
from eventhub.db.init_db import init_db
from eventhub.services.broadcasts import reap

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def run_reaper_once():
    db = SessionLocal()
    try:
        return reap(db)
    finally:
        db.close()


async def reaper_loop(interval: int):
    while True:
        try:
            await run_in_threadpool(run_reaper_once)
        except Exception:
            logger.exception("Broadcast reaper run failed")
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    task = None
    if config.BROADCAST_REAPER_INTERVAL_SECONDS > 0:
        task = asyncio.create_task(reaper_loop(config.BROADCAST_REAPER_INTERVAL_SECONDS))
        logger.info(f"Broadcast reaper started (every {config.BROADCAST_REAPER_INTERVAL_SECONDS}s)")
    yield
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


app = FastAPI(title="EventHub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookingPlatformError)
async def domain_error_handler(request: Request, exc: BookingPlatformError):
    body = {"success": False, "message": exc.message, "code": exc.code}
    if exc.details is not None:
        body["errors"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "code": "validation_failed", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "code": "http_error"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Server error", "code": "server_error"},
    )


@app.get("/")
def root():
    return {"success": True, "message": "EventHub API running"}


app.include_router(auth.router, prefix="/api")
app.include_router(users_router.router, prefix="/api")
app.include_router(services_router.router, prefix="/api")
app.include_router(bookings_router.router, prefix="/api")
app.include_router(availability_router.router, prefix="/api")
app.include_router(broadcasts_router.router, prefix="/api")
app.include_router(reviews_router.router, prefix="/api")
