"""Transport and volume control for single players and whole groups.

Transport state is a group property, so play/pause and friends always go to
the coordinator of the addressed room. Toggles and relative volume changes
read the current value and then write; a change made by someone else in
between is not detected.
"""

import logging
from typing import Literal

from sonos_zones.core.interfaces import CommandGateway, PlayerDirectory
from sonos_zones.errors import InvalidCommandError, RoomNotFoundError
from sonos_zones.gateway.commands import (
    Command,
    GroupMute,
    GroupUnmute,
    Mute,
    Next,
    Pause,
    Play,
    Previous,
    SetGroupVolume,
    SetVolume,
    Unmute,
)
from sonos_zones.models.topology import PlaybackState, PlayerSnapshot

logger = logging.getLogger(__name__)

PlayerAction = Literal["play", "pause", "playpause"]
VolumeMode = Literal["absolute", "relative"]


class PlaybackController:
    def __init__(self, directory: PlayerDirectory, gateway: CommandGateway) -> None:
        self._directory = directory
        self._gateway = gateway

    async def _send_to_coordinator(self, room: str, command: Command) -> None:
        handle = await self._directory.resolve_coordinator(room)
        await self._gateway.send(handle, command)

    async def _player_snapshot(self, room: str) -> PlayerSnapshot:
        uid = self._directory.resolve(room).uid
        zone = await self._directory.zone_of(room)
        for member in zone.members:
            if member.id == uid:
                return member
        raise RoomNotFoundError(room)

    # Transport

    async def play(self, room: str) -> None:
        await self._send_to_coordinator(room, Play())

    async def pause(self, room: str) -> None:
        await self._send_to_coordinator(room, Pause())

    async def next(self, room: str) -> None:
        await self._send_to_coordinator(room, Next())

    async def previous(self, room: str) -> None:
        await self._send_to_coordinator(room, Previous())

    async def play_pause(self, room: str) -> dict:
        """Pause if the group is playing, otherwise play."""
        zone = await self._directory.zone_of(room)
        coordinator = self._directory.handle(zone.coordinator.id)
        if zone.coordinator.playback_state is PlaybackState.PLAYING:
            await self._gateway.send(coordinator, Pause())
            return {"paused": True}
        await self._gateway.send(coordinator, Play())
        return {"paused": False}

    async def player_action(self, room: str, action: PlayerAction) -> dict | None:
        if action == "play":
            await self.play(room)
            return None
        if action == "pause":
            await self.pause(room)
            return None
        if action == "playpause":
            return await self.play_pause(room)
        raise InvalidCommandError(f"Unknown action: {action}")

    async def pause_all(self) -> list[str]:
        """Pause every zone that is currently playing. Returns the coordinators paused."""
        snapshot = await self._directory.list_zones()
        paused = []
        for zone in snapshot.zones:
            if zone.coordinator.playback_state is not PlaybackState.PLAYING:
                continue
            await self._gateway.send(self._directory.handle(zone.coordinator.id), Pause())
            paused.append(zone.coordinator.room_name)
        logger.info("Paused %d zones: %s", len(paused), paused)
        return paused

    # Volume

    async def zone_action(self, room: str, value: int, mode: VolumeMode) -> int:
        """Set the group volume of ``room``'s zone.

        ``relative`` adds ``value`` to the current group volume. The result is
        not clamped here; the speaker clamps it.
        """
        if mode == "absolute":
            await self._send_to_coordinator(room, SetGroupVolume(value))
            return value
        if mode != "relative":
            raise InvalidCommandError(f"Unknown volume mode: {mode}")

        zone = await self._directory.zone_of(room)
        target = zone.volume + value
        logger.debug("Group volume for %s: %d -> %d", room, zone.volume, target)
        await self._gateway.send(self._directory.handle(zone.coordinator.id), SetGroupVolume(target))
        return target

    async def set_volume(self, room: str, value: int, mode: VolumeMode = "absolute") -> int:
        handle = self._directory.resolve(room)
        if mode == "relative":
            player = await self._player_snapshot(room)
            value = player.volume + value
        elif mode != "absolute":
            raise InvalidCommandError(f"Unknown volume mode: {mode}")
        await self._gateway.send(handle, SetVolume(value))
        return value

    async def mute(self, room: str) -> None:
        await self._gateway.send(self._directory.resolve(room), Mute())

    async def unmute(self, room: str) -> None:
        await self._gateway.send(self._directory.resolve(room), Unmute())

    async def toggle_mute(self, room: str) -> bool:
        player = await self._player_snapshot(room)
        handle = self._directory.resolve(room)
        if player.muted:
            await self._gateway.send(handle, Unmute())
            return False
        await self._gateway.send(handle, Mute())
        return True

    async def group_mute(self, room: str) -> None:
        await self._send_to_coordinator(room, GroupMute())

    async def group_unmute(self, room: str) -> None:
        await self._send_to_coordinator(room, GroupUnmute())
