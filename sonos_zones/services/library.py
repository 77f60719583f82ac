import logging
from typing import Literal

from sonos_zones.core.interfaces import CommandGateway, PlayerDirectory
from sonos_zones.errors import (
    FavoriteNotFoundError,
    InvalidCommandError,
    PlaylistNotFoundError,
)
from sonos_zones.gateway.commands import (
    AddURIToQueue,
    ClearQueue,
    Play,
    PlayFromQueue,
    PlayURI,
    Seek,
    SetAVTransport,
    SetCrossfade,
    SetEqualizer,
    SetPlayMode,
    SetSleepTimer,
)
from sonos_zones.models.state import LibraryItem
from sonos_zones.services import media
from sonos_zones.utils.speaker import format_seek_position

logger = logging.getLogger(__name__)

SpotifyMode = Literal["now", "next", "queue"]

# Play mode name -> device play_mode. "crossfade" toggles crossfade instead.
PLAY_MODES = {
    "normal": "NORMAL",
    "repeat_all": "REPEAT_ALL",
    "shuffle": "SHUFFLE_NOREPEAT",
    "shuffle_norepeat": "SHUFFLE_NOREPEAT",
    "shuffle_repeat_one": "SHUFFLE_REPEAT_ONE",
    "repeat_one": "REPEAT_ONE",
}


def match_by_title(items: list[LibraryItem], name: str) -> LibraryItem | None:
    """Find an item by title, case-insensitive.

    Prefers an exact match, then a prefix match, then a substring match.
    """
    name_lower = name.lower()
    prefix = None
    contains = None
    for item in items:
        title_lower = item.title.lower()
        if title_lower == name_lower:
            return item
        elif prefix is None and title_lower.startswith(name_lower):
            prefix = item
        elif contains is None and name_lower in title_lower:
            contains = item
    return prefix or contains


def _clamp_eq(value: int | None) -> int | None:
    return None if value is None else max(-10, min(10, value))


class MediaController:
    """Content selection and per-room playback settings."""

    def __init__(self, directory: PlayerDirectory, gateway: CommandGateway, queue_limit: int = 500) -> None:
        self._directory = directory
        self._gateway = gateway
        self._queue_limit = queue_limit

    # Favorites and playlists

    async def favorites(self) -> list[LibraryItem]:
        return await self._gateway.favorites(self._directory.any_handle())

    async def playlists(self) -> list[LibraryItem]:
        return await self._gateway.playlists(self._directory.any_handle())

    async def play_favorite(self, room: str, name: str) -> str:
        coordinator = await self._directory.resolve_coordinator(room)
        favorites = await self._gateway.favorites(coordinator)
        match = match_by_title(favorites, name)
        if match is None:
            raise FavoriteNotFoundError(name, [f.title for f in favorites])

        logger.info("Playing favorite '%s' on %s", match.title, coordinator.room_name)
        await self._gateway.send(coordinator, PlayURI(match.uri, match.metadata))
        return match.title

    async def play_playlist(self, room: str, name: str) -> str:
        coordinator = await self._directory.resolve_coordinator(room)
        playlists = await self._gateway.playlists(coordinator)
        match = match_by_title(playlists, name)
        if match is None:
            raise PlaylistNotFoundError(name, [p.title for p in playlists])

        logger.info("Playing playlist '%s' on %s", match.title, coordinator.room_name)
        await self._gateway.send(coordinator, ClearQueue())
        await self._gateway.send(coordinator, AddURIToQueue(match.uri, match.metadata))
        await self._gateway.send(coordinator, PlayFromQueue(0))
        return match.title

    # Queue

    async def queue(self, room: str, limit: int | None = None) -> list[LibraryItem]:
        coordinator = await self._directory.resolve_coordinator(room)
        return await self._gateway.queue(coordinator, limit or self._queue_limit)

    async def clear_queue(self, room: str) -> None:
        coordinator = await self._directory.resolve_coordinator(room)
        await self._gateway.send(coordinator, ClearQueue())

    # Streaming services

    async def spotify(self, room: str, service_uri: str, mode: SpotifyMode) -> media.TranslatedMedia:
        translated = media.translate(service_uri)
        if mode == "now":
            coordinator = await self._directory.resolve_coordinator(room)
            await self._gateway.send(coordinator, ClearQueue())
            await self._gateway.send(coordinator, AddURIToQueue(translated.uri, translated.metadata))
            await self._gateway.send(coordinator, Play())
        elif mode == "next":
            zone = await self._directory.zone_of(room)
            coordinator = self._directory.handle(zone.coordinator.id)
            position = zone.coordinator.track_no + 1
            await self._gateway.send(coordinator, AddURIToQueue(translated.uri, translated.metadata, position))
        elif mode == "queue":
            coordinator = await self._directory.resolve_coordinator(room)
            await self._gateway.send(coordinator, AddURIToQueue(translated.uri, translated.metadata))
        else:
            raise InvalidCommandError(f"Unknown Spotify mode: {mode}")
        return translated

    async def tunein(self, room: str, station_id: str) -> media.TranslatedMedia:
        translated = media.tunein(station_id)
        coordinator = await self._directory.resolve_coordinator(room)
        await self._gateway.send(coordinator, SetAVTransport(translated.uri, translated.metadata))
        await self._gateway.send(coordinator, Play())
        return translated

    async def line_in(self, room: str, source_room: str | None = None) -> str:
        source = self._directory.resolve(source_room or room)
        coordinator = await self._directory.resolve_coordinator(room)
        uri = media.line_in(source.uid)
        await self._gateway.send(coordinator, SetAVTransport(uri))
        return source.room_name

    # Settings

    async def seek(self, room: str, track: int | None = None, position: int | None = None) -> None:
        """Jump to a 1-based queue track and/or an elapsed time in seconds."""
        if track is None and position is None:
            raise InvalidCommandError("Must specify 'position' (seconds) or 'track' (number)")
        coordinator = await self._directory.resolve_coordinator(room)
        if track is not None:
            await self._gateway.send(coordinator, PlayFromQueue(track - 1))
        if position is not None:
            await self._gateway.send(coordinator, Seek(format_seek_position(position)))

    async def sleep(self, room: str, value: int | str) -> int | None:
        if value == "off":
            seconds = None
        else:
            try:
                seconds = int(value) or None
            except ValueError:
                raise InvalidCommandError(f"Invalid sleep time: {value}") from None
        coordinator = await self._directory.resolve_coordinator(room)
        await self._gateway.send(coordinator, SetSleepTimer(seconds))
        return seconds

    async def set_play_mode(self, room: str, mode: str) -> str:
        mode = mode.lower()
        if mode == "crossfade":
            command = SetCrossfade(True)
        elif mode in PLAY_MODES:
            command = SetPlayMode(PLAY_MODES[mode])
        else:
            raise InvalidCommandError(f"Invalid play mode: {mode}")
        coordinator = await self._directory.resolve_coordinator(room)
        await self._gateway.send(coordinator, command)
        return mode

    async def set_equalizer(
        self,
        room: str,
        bass: int | None = None,
        treble: int | None = None,
        loudness: bool | None = None,
    ) -> dict:
        command = SetEqualizer(bass=_clamp_eq(bass), treble=_clamp_eq(treble), loudness=loudness)
        await self._gateway.send(self._directory.resolve(room), command)
        applied = {"bass": command.bass, "treble": command.treble, "loudness": command.loudness}
        return {k: v for k, v in applied.items() if v is not None}

    # Household

    async def reindex(self) -> None:
        await self._gateway.reindex(self._directory.any_handle())

    async def music_services(self) -> list[str]:
        return await self._gateway.music_services(self._directory.any_handle())
