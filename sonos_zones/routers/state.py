from fastapi import APIRouter, Request

from sonos_zones.models.state import PlayerState, ZoneInfo

router = APIRouter()


@router.get("/zones", response_model=list[ZoneInfo])
async def get_zones(request: Request):
    """Get all zone/group topology."""
    snapshot = await request.app.state.speaker_manager.list_zones()
    return [ZoneInfo.from_snapshot(zone) for zone in snapshot.zones]


@router.get("/players", response_model=list[str])
async def get_players(request: Request):
    """Room names of every player in every zone."""
    snapshot = await request.app.state.speaker_manager.list_zones()
    return [player.room_name for player in snapshot.players]


@router.get("/{room}/state", response_model=PlayerState)
async def get_state(room: str, request: Request):
    """Get the current player state for a room."""
    return await request.app.state.speaker_manager.player_state(room)
