from datetime import datetime, timezone

from fastapi import APIRouter, Request

from sonos_zones.models.state import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check with device count."""
    manager = request.app.state.speaker_manager
    return HealthResponse(
        status="ok",
        speakers=len(manager.speakers),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post("/pauseall")
async def pause_all(request: Request):
    """Pause all playing zones."""
    paused = await request.app.state.playback.pause_all()
    return {"status": "ok", "paused": len(paused), "rooms": paused}


@router.post("/reindex")
async def reindex(request: Request):
    """Start a music library re-index."""
    await request.app.state.media.reindex()
    return {"status": "ok"}


@router.get("/services", response_model=list[str])
async def music_services(request: Request):
    """Music services known to the household."""
    return await request.app.state.media.music_services()
