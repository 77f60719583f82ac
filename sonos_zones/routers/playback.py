from fastapi import APIRouter, Request

from sonos_zones.core.playback import PlaybackController

router = APIRouter()


def _controller(request: Request) -> PlaybackController:
    return request.app.state.playback


@router.post("/{room}/play")
async def play(room: str, request: Request):
    """Resume playback on the room's group."""
    await _controller(request).play(room)
    return {"status": "ok"}


@router.post("/{room}/pause")
async def pause(room: str, request: Request):
    """Pause playback on the room's group."""
    await _controller(request).pause(room)
    return {"status": "ok"}


@router.post("/{room}/playpause")
async def playpause(room: str, request: Request):
    """Toggle play/pause."""
    result = await _controller(request).play_pause(room)
    return {"status": "ok", **result}


@router.post("/{room}/next")
async def next_track(room: str, request: Request):
    """Skip to next track."""
    await _controller(request).next(room)
    return {"status": "ok"}


@router.post("/{room}/previous")
async def previous_track(room: str, request: Request):
    """Go to previous track."""
    await _controller(request).previous(room)
    return {"status": "ok"}
