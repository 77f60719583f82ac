from fastapi import APIRouter, Request

from sonos_zones.services.library import SpotifyMode

router = APIRouter()


@router.post("/{room}/spotify/{mode}/{uri}")
async def spotify(room: str, mode: SpotifyMode, uri: str, request: Request):
    """Play a Spotify URI now, next, or add it to the end of the queue."""
    translated = await request.app.state.media.spotify(room, uri, mode)
    return {"status": "ok", "mode": mode, "uri": translated.uri}


@router.post("/{room}/tunein/{station}")
async def tunein(room: str, station: str, request: Request):
    """Play a TuneIn radio station."""
    translated = await request.app.state.media.tunein(room, station)
    return {"status": "ok", "uri": translated.uri}
