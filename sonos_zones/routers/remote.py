"""Universal remote surface for non-Sonos entertainment devices.

These routes validate the remote's action vocabulary, log the command and
acknowledge it. They do not talk to any speaker.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()
logger = logging.getLogger(__name__)

POWER_ACTIONS = ("on", "off", "toggle")
VOLUME_ACTIONS = ("up", "down", "set")
MUTE_ACTIONS = ("on", "off", "toggle")
CHANNEL_ACTIONS = ("up", "down", "set")
VALID_SOURCES = ("hdmi1", "hdmi2", "hdmi3", "usb", "bluetooth", "aux")
VALID_DIRECTIONS = ("up", "down", "left", "right", "select", "back", "home", "menu")


class ActionRequest(BaseModel):
    action: str = ""


class VolumeRequest(BaseModel):
    action: str = ""
    level: int | None = None


class ChannelRequest(BaseModel):
    action: str = ""
    number: int | None = None


class InputRequest(BaseModel):
    source: str = ""


class NavigateRequest(BaseModel):
    direction: str = ""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ack(**fields: Any) -> dict:
    return {"success": True, **fields, "timestamp": _now()}


def _bad_request(error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error, **extra})


@router.post("/device/power")
async def power(body: ActionRequest):
    if body.action not in POWER_ACTIONS:
        return _bad_request("Invalid power action", validActions=list(POWER_ACTIONS))
    logger.info("Power command received: %s", body.action)
    return _ack(action=body.action)


@router.get("/device/power/{action}")
async def power_get(action: str):
    if action not in POWER_ACTIONS:
        return _bad_request("Invalid power action", validActions=list(POWER_ACTIONS))
    logger.info("GET power command received: %s", action)
    return _ack(action=action, method="GET")


@router.post("/device/volume")
async def volume(body: VolumeRequest):
    if body.action not in VOLUME_ACTIONS:
        return _bad_request("Invalid volume action", validActions=list(VOLUME_ACTIONS))
    if body.action == "set" and (body.level is None or not 0 <= body.level <= 100):
        return _bad_request("Invalid volume level (0-100)")
    logger.info("Volume command received: %s (level: %s)", body.action, body.level)
    return _ack(action=body.action, level=body.level)


@router.post("/device/mute")
async def mute(body: ActionRequest):
    if body.action not in MUTE_ACTIONS:
        return _bad_request("Invalid mute action", validActions=list(MUTE_ACTIONS))
    logger.info("Mute command received: %s", body.action)
    return _ack(action=body.action)


@router.post("/device/input")
async def input_source(body: InputRequest):
    if body.source not in VALID_SOURCES:
        return _bad_request("Invalid source", validSources=list(VALID_SOURCES))
    logger.info("Switching to input: %s", body.source)
    return _ack(source=body.source)


@router.post("/device/channel")
async def channel(body: ChannelRequest):
    if body.action not in CHANNEL_ACTIONS:
        return _bad_request("Invalid channel action", validActions=list(CHANNEL_ACTIONS))
    if body.action == "set" and (body.number is None or body.number <= 0):
        return _bad_request("Invalid channel number")
    logger.info("Channel command received: %s (%s)", body.action, body.number)
    return _ack(action=body.action, number=body.number)


@router.post("/device/navigate")
async def navigate(body: NavigateRequest):
    if body.direction not in VALID_DIRECTIONS:
        return _bad_request("Invalid direction", validDirections=list(VALID_DIRECTIONS))
    logger.info("Navigating: %s", body.direction)
    return _ack(direction=body.direction)


@router.post("/command/{command_name}")
async def custom_command(command_name: str, payload: dict[str, Any] | None = None):
    """Acknowledge a device-specific command with an arbitrary JSON payload."""
    logger.info("Custom command received: %s payload=%s", command_name, payload)
    return _ack(command=command_name, payload=payload or {})
