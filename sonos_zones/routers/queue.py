from fastapi import APIRouter, Request
from pydantic import BaseModel

from sonos_zones.services.library import MediaController

router = APIRouter()


class QueueItem(BaseModel):
    position: int
    title: str = ""
    artist: str = ""
    album: str = ""
    album_art: str = ""
    uri: str = ""


class QueueResponse(BaseModel):
    room: str
    total: int
    items: list[QueueItem]


def _media(request: Request) -> MediaController:
    return request.app.state.media


@router.get("/{room}/queue", response_model=QueueResponse, response_model_exclude_unset=True)
async def get_queue(room: str, request: Request, detailed: bool = False, limit: int | None = None):
    """Get current queue. URIs are only included when ``detailed`` is set."""
    queue = await _media(request).queue(room, limit)

    items = []
    for i, item in enumerate(queue):
        fields = {
            "position": i + 1,
            "title": item.title,
            "artist": item.artist,
            "album": item.album,
            "album_art": item.album_art,
        }
        if detailed:
            fields["uri"] = item.uri
        items.append(QueueItem(**fields))

    return QueueResponse(room=room, total=len(items), items=items)


@router.delete("/{room}/queue")
async def clear_queue(room: str, request: Request):
    """Clear the queue."""
    await _media(request).clear_queue(room)
    return {"status": "ok"}
