from fastapi import APIRouter, Request
from pydantic import BaseModel

from sonos_zones.core.playback import PlaybackController, VolumeMode
from sonos_zones.errors import InvalidCommandError

router = APIRouter()


class VolumeRequest(BaseModel):
    volume: int | str  # absolute int or "+5"/"-5"


def parse_volume(value: int | str) -> tuple[int, VolumeMode]:
    """Split a request volume into (value, mode). Signed strings are relative."""
    if isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            raise InvalidCommandError(f"Invalid volume: {value!r}") from None
        return number, "relative" if text[:1] in ("+", "-") else "absolute"
    return value, "absolute"


def _controller(request: Request) -> PlaybackController:
    return request.app.state.playback


@router.put("/{room}/volume")
async def set_volume(room: str, body: VolumeRequest, request: Request):
    """Set volume (absolute or relative)."""
    value, mode = parse_volume(body.volume)
    new_vol = await _controller(request).set_volume(room, value, mode)
    return {"status": "ok", "volume": new_vol}


@router.post("/{room}/mute")
async def mute(room: str, request: Request):
    """Mute speaker."""
    await _controller(request).mute(room)
    return {"status": "ok", "mute": True}


@router.post("/{room}/unmute")
async def unmute(room: str, request: Request):
    """Unmute speaker."""
    await _controller(request).unmute(room)
    return {"status": "ok", "mute": False}


@router.post("/{room}/togglemute")
async def togglemute(room: str, request: Request):
    """Toggle mute."""
    new_mute = await _controller(request).toggle_mute(room)
    return {"status": "ok", "mute": new_mute}
