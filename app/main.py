import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.routers import auth, reservations, date_blocks, properties, activities
from app.config import settings
from app.database import Base, engine
from app.services.change_feed import ChangeFeed
from app.services.reservation_service import BackendUnavailable
from app.utils.logging_config import setup_logging
from app.utils.rate_limit import limiter
from app.middleware.logging_middleware import log_requests


logger = setup_logging()
logger.info("Application starting...")


def _log_reservation_changes(current: list):
    logging.getLogger("app.change_feed").info(f"Reservierungen aktualisiert: {len(current)} aktiv")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
    unsubscribe = app.state.change_feed.subscribe(_log_reservation_changes)
    yield
    unsubscribe()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
app.state.change_feed = ChangeFeed()
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(BackendUnavailable)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
    return JSONResponse(
        status_code=503,
        content={"detail": "Speicher gerade nicht erreichbar, bitte später erneut versuchen"}
    )


app.middleware("http")(log_requests)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(reservations.router)
app.include_router(date_blocks.router)
app.include_router(properties.router)
app.include_router(activities.router)

@app.get("/")
def root() -> dict:
        return {"message": "Reservierungssystem läuft!", "app": settings.app_name}

@app.get("/health")
def health() -> dict:
        return {"status": "ok"}
