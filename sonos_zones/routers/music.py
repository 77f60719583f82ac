"""One-tap routes for a remote: drive the configured music coordinator."""

import logging
from typing import Literal

from fastapi import APIRouter, Request

from sonos_zones.config import settings
from sonos_zones.core.playback import PlayerAction

router = APIRouter(prefix="/music")
logger = logging.getLogger(__name__)

# Group volume step per button press
_VOLUME_STEPS = {"up": 1, "down": -2}


@router.post("/start/{playlist}")
async def start(playlist: str, request: Request):
    """Group every player under the coordinator and start a favorite."""
    coordinator = settings.music_coordinator
    name = playlist.replace("_", " ")

    await request.app.state.reconciler.group_all(coordinator)
    title = await request.app.state.media.play_favorite(coordinator, name)
    await request.app.state.playback.player_action(coordinator, "play")

    logger.info("Started '%s' on %s", title, coordinator)
    return {"status": "ok", "action": "play", "coordinator": coordinator, "favorite": title}


@router.post("/volume/{direction}")
async def volume(direction: Literal["up", "down"], request: Request):
    delta = _VOLUME_STEPS[direction]
    new_vol = await request.app.state.playback.zone_action(settings.music_coordinator, delta, "relative")
    return {"status": "ok", "volume": new_vol}


@router.post("/{action}")
async def action(action: PlayerAction, request: Request):
    result = await request.app.state.playback.player_action(settings.music_coordinator, action)
    return {"status": "ok", "action": action, **(result or {})}
