from fastapi import APIRouter, Request
from pydantic import BaseModel

from sonos_zones.core.playback import PlaybackController
from sonos_zones.core.reconciler import ZoneReconciler
from sonos_zones.models.topology import DesiredGrouping
from sonos_zones.routers.volume import parse_volume

router = APIRouter()


class GroupVolumeRequest(BaseModel):
    volume: int | str  # absolute int or "+5"/"-5"


class CreateGroupRequest(BaseModel):
    coordinator: str
    members: list[str]


def _reconciler(request: Request) -> ZoneReconciler:
    return request.app.state.reconciler


def _playback(request: Request) -> PlaybackController:
    return request.app.state.playback


@router.post("/creategroup")
async def create_group(body: CreateGroupRequest, request: Request):
    """Group the requested rooms under one coordinator."""
    desired = DesiredGrouping(coordinator_room=body.coordinator, member_rooms=body.members)
    coordinator = await _reconciler(request).reconcile(desired)
    if coordinator is None:
        return {"status": "not_applicable", "coordinator": None}
    return {"status": "ok", "coordinator": coordinator}


@router.post("/{room}/join/{other}")
async def join_group(room: str, other: str, request: Request):
    """Join {room} to {other}'s group. {other} becomes/stays the coordinator."""
    await _reconciler(request).join(room, other)
    return {"status": "ok", "room": room, "joined": other}


@router.post("/{room}/leave")
async def leave_group(room: str, request: Request):
    """Remove {room} from its current group."""
    await _reconciler(request).leave(room)
    return {"status": "ok", "room": room}


@router.put("/{room}/groupvolume")
async def set_group_volume(room: str, body: GroupVolumeRequest, request: Request):
    """Set volume for the entire group that {room} belongs to."""
    value, mode = parse_volume(body.volume)
    new_vol = await _playback(request).zone_action(room, value, mode)
    return {"status": "ok", "volume": new_vol}


@router.post("/{room}/groupmute")
async def group_mute(room: str, request: Request):
    await _playback(request).group_mute(room)
    return {"status": "ok", "mute": True}


@router.post("/{room}/groupunmute")
async def group_unmute(room: str, request: Request):
    await _playback(request).group_unmute(room)
    return {"status": "ok", "mute": False}
