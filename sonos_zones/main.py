import asyncio
import logging
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from sonos_zones.config import settings
from sonos_zones.core.interfaces import CommandGateway, PlayerDirectory
from sonos_zones.core.playback import PlaybackController
from sonos_zones.core.reconciler import ZoneReconciler
from sonos_zones.discovery.manager import SpeakerManager
from sonos_zones.errors import (
    DeviceError,
    DeviceUnreachableError,
    DirectoryUnavailableError,
    FavoriteNotFoundError,
    InvalidCommandError,
    NotFoundError,
    UnsupportedContentTypeError,
)
from sonos_zones.gateway.soco_gateway import SocoGateway
from sonos_zones.routers import (
    equalizer,
    favorites,
    groups,
    music,
    playback,
    queue,
    remote,
    state,
    streaming,
    system,
    volume,
)
from sonos_zones.routers import settings as settings_router
from sonos_zones.services.library import MediaController


def setup_logging() -> None:
    """Configure structlog for structured logging."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level.upper())

    # Quiet noisy loggers
    logging.getLogger("soco").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def attach_controllers(app: FastAPI, directory: PlayerDirectory, gateway: CommandGateway) -> None:
    """Build the controllers around one directory and one gateway."""
    app.state.speaker_manager = directory
    app.state.reconciler = ZoneReconciler(directory, gateway, baseline_volume=settings.group_baseline_volume)
    app.state.playback = PlaybackController(directory, gateway)
    app.state.media = MediaController(directory, gateway, queue_limit=settings.queue_limit)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger = structlog.get_logger()
    logger.info("Starting Sonos zones API", port=settings.api_port)

    manager = SpeakerManager(
        discovery_interval=settings.discovery_interval,
        discovery_timeout=settings.discovery_timeout,
        retries=settings.command_retries,
        retry_delay=settings.command_retry_delay,
    )
    gateway = SocoGateway(retries=settings.command_retries, retry_delay=settings.command_retry_delay)
    attach_controllers(app, manager, gateway)
    await manager.start()

    yield

    logger.info("Shutting down Sonos zones API")
    await manager.stop()


app = FastAPI(
    title="Sonos Zones API",
    description="HTTP control surface for Sonos zones and groups",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")


# Register routers. Fixed-prefix routers go first so "/music/play" and
# "/device/mute" are not captured by the "/{room}/..." routes.
app.include_router(system.router, tags=["system"])
app.include_router(music.router, tags=["music"])
app.include_router(remote.router, tags=["remote"])
app.include_router(state.router, tags=["state"])
app.include_router(groups.router, tags=["groups"])
app.include_router(playback.router, tags=["playback"])
app.include_router(volume.router, tags=["volume"])
app.include_router(queue.router, tags=["queue"])
app.include_router(favorites.router, tags=["favorites"])
app.include_router(streaming.router, tags=["streaming"])
app.include_router(settings_router.router, tags=["settings"])
app.include_router(equalizer.router, tags=["equalizer"])


# Global exception handlers
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger = structlog.get_logger()
    logger.info("Not found", kind=exc.kind, name=exc.name, path=request.url.path)
    content = {"error": exc.kind, "detail": exc.name}
    if isinstance(exc, FavoriteNotFoundError):
        content["available"] = exc.available
    return JSONResponse(status_code=404, content=content)


@app.exception_handler(UnsupportedContentTypeError)
async def unsupported_type_handler(request: Request, exc: UnsupportedContentTypeError):
    return JSONResponse(
        status_code=400,
        content={"error": "Unsupported content type", "detail": str(exc)},
    )


@app.exception_handler(InvalidCommandError)
async def invalid_command_handler(request: Request, exc: InvalidCommandError):
    return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": str(exc)})


@app.exception_handler(DirectoryUnavailableError)
async def directory_unavailable_handler(request: Request, exc: DirectoryUnavailableError):
    logger = structlog.get_logger()
    logger.warning("Directory unavailable", path=request.url.path)
    return JSONResponse(
        status_code=503,
        content={"error": "No speakers available", "detail": str(exc)},
    )


@app.exception_handler(DeviceError)
async def device_error_handler(request: Request, exc: DeviceError):
    logger = structlog.get_logger()
    logger.error("Speaker error", code=exc.code, error=exc.detail, path=request.url.path)
    return JSONResponse(
        status_code=502,
        content={"error": "Speaker communication error", "code": exc.code, "detail": exc.detail},
    )


@app.exception_handler(DeviceUnreachableError)
async def unreachable_handler(request: Request, exc: DeviceUnreachableError):
    logger = structlog.get_logger()
    logger.error("Connection error", error=exc.detail, path=request.url.path)
    # Trigger re-discovery in background
    manager = getattr(request.app.state, "speaker_manager", None)
    if isinstance(manager, SpeakerManager):
        asyncio.create_task(manager.trigger_rediscovery())
    return JSONResponse(
        status_code=503,
        content={"error": "Speaker unreachable", "detail": exc.detail},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger = structlog.get_logger()
    logger.exception("Unhandled error", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)},
    )


def run() -> None:
    uvicorn.run("sonos_zones.main:app", host=settings.api_host, port=settings.api_port)
