from fastapi import APIRouter, Request
from pydantic import BaseModel

from sonos_zones.services.library import MediaController

router = APIRouter()


class FavoriteItem(BaseModel):
    title: str
    uri: str = ""
    meta: str = ""


class FavoritesResponse(BaseModel):
    total: int
    items: list[FavoriteItem]


def _media(request: Request) -> MediaController:
    return request.app.state.media


def _to_response(items) -> FavoritesResponse:
    return FavoritesResponse(
        total=len(items),
        items=[FavoriteItem(title=i.title, uri=i.uri, meta=i.metadata) for i in items],
    )


@router.get("/favorites", response_model=FavoritesResponse)
async def get_favorites(request: Request):
    """List Sonos favorites."""
    return _to_response(await _media(request).favorites())


@router.get("/playlists", response_model=FavoritesResponse)
async def get_playlists(request: Request):
    """List Sonos playlists."""
    return _to_response(await _media(request).playlists())


@router.post("/{room}/favorite/{name}")
async def play_favorite(room: str, name: str, request: Request):
    """Play a Sonos favorite by name (case-insensitive partial match)."""
    title = await _media(request).play_favorite(room, name)
    return {"status": "ok", "favorite": title}


@router.post("/{room}/playlist/{name}")
async def play_playlist(room: str, name: str, request: Request):
    """Replace the queue with a Sonos playlist and play it."""
    title = await _media(request).play_playlist(room, name)
    return {"status": "ok", "playlist": title}
