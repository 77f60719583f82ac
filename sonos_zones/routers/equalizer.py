from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class EqualizerRequest(BaseModel):
    bass: int | None = None  # -10 to 10
    treble: int | None = None  # -10 to 10
    loudness: bool | None = None


@router.put("/{room}/equalizer")
async def set_equalizer(room: str, body: EqualizerRequest, request: Request):
    """Set bass and/or treble (-10 to 10) and loudness."""
    result = await request.app.state.media.set_equalizer(room, body.bass, body.treble, body.loudness)
    return {"status": "ok", **result}
