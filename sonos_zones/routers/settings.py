from fastapi import APIRouter, Request
from pydantic import BaseModel

from sonos_zones.services.library import MediaController

router = APIRouter()


class PlayModeRequest(BaseModel):
    mode: str  # normal, repeat_all, repeat_one, shuffle, shuffle_norepeat, shuffle_repeat_one, crossfade


class SeekRequest(BaseModel):
    position: int | None = None  # seconds
    track: int | None = None  # track number (1-based)


class SleepTimerRequest(BaseModel):
    seconds: int | str  # 0 or "off" to cancel


class LineInRequest(BaseModel):
    source: str | None = None  # room whose line-in to play, defaults to {room}


def _media(request: Request) -> MediaController:
    return request.app.state.media


@router.put("/{room}/playmode")
async def set_playmode(room: str, body: PlayModeRequest, request: Request):
    """Set play mode (shuffle/repeat/crossfade)."""
    mode = await _media(request).set_play_mode(room, body.mode)
    return {"status": "ok", "mode": mode}


@router.post("/{room}/seek")
async def seek(room: str, body: SeekRequest, request: Request):
    """Seek to position (seconds) and/or track number."""
    await _media(request).seek(room, track=body.track, position=body.position)
    return {"status": "ok"}


@router.put("/{room}/sleep")
async def set_sleep_timer(room: str, body: SleepTimerRequest, request: Request):
    """Set sleep timer (seconds). Use 0 or "off" to cancel."""
    seconds = await _media(request).sleep(room, body.seconds)
    return {"status": "ok", "seconds": seconds or 0}


@router.post("/{room}/linein")
async def line_in(room: str, request: Request, body: LineInRequest | None = None):
    """Play a player's line-in input on {room}'s group."""
    source = await _media(request).line_in(room, body.source if body else None)
    return {"status": "ok", "source": source}

