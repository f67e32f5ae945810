from fastapi import FastAPI, Request, APIRouter
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.routes import events as events_router, bookings as bookings_router, health as health_router
from app.cache.redis_client import cache
from app.core.config import settings
from app.core.errors import EventHubError, ErrorCode
from app.core.logging import logger
from app.db.session import ConnectionManager

app = FastAPI(title="EventHub")

# Set at startup; tests override get_session instead
app.state.db = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(events_router.router)
api_router.include_router(bookings_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)

ERROR_STATUS = {
    ErrorCode.REQUIRED_FIELD: 422,
    ErrorCode.INVALID_DATE: 422,
    ErrorCode.INVALID_TIME: 422,
    ErrorCode.INVALID_EMAIL: 422,
    ErrorCode.NOT_UNIQUE: 409,
    ErrorCode.DANGLING_REFERENCE: 404,
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.BOOKING_NOT_FOUND: 404,
    ErrorCode.DEPENDENCY_UNAVAILABLE: 503,
    ErrorCode.CONNECTION_FAILED: 503,
}


@app.exception_handler(EventHubError)
async def eventhub_error_handler(request: Request, exc: EventHubError):
    status_code = ERROR_STATUS.get(exc.code, 400)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code.value},
    )


@app.on_event("startup")
async def on_startup():
    # create tables and indexes (simple approach, no migrations)
    app.state.db = ConnectionManager(settings.DATABASE_URL)
    await app.state.db.init()


@app.on_event("shutdown")
async def on_shutdown():
    if app.state.db is not None:
        await app.state.db.teardown()
    await cache.close()
