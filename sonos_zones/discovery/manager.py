import asyncio
import logging

import soco
from soco.exceptions import SoCoException

from sonos_zones.errors import DirectoryUnavailableError, RoomNotFoundError
from sonos_zones.gateway.commands import PlayerHandle
from sonos_zones.gateway.soco_gateway import run_on_device
from sonos_zones.models.state import EqualizerState, PlayerState, TrackInfo
from sonos_zones.models.topology import (
    PlaybackState,
    PlayerSnapshot,
    ZoneSnapshot,
    ZoneTopologySnapshot,
)
from sonos_zones.utils.retry import TRANSIENT_ERRORS
from sonos_zones.utils.speaker import normalize_room_name

logger = logging.getLogger(__name__)


def _zone_state(group) -> tuple[PlaybackState, int, int, bool]:
    """Transport state, queue position, group volume and group mute. Blocking."""
    coordinator = group.coordinator
    transport = coordinator.get_current_transport_info()
    track = coordinator.get_current_track_info()
    return (
        PlaybackState.parse(transport.get("current_transport_state")),
        int(track.get("playlist_position") or 0),
        group.volume,
        group.mute,
    )


def _build_zone(group, state: PlaybackState, track_no: int, volume: int, muted: bool) -> ZoneSnapshot:
    coordinator = group.coordinator
    members = []
    for member in group.members:
        if not member.is_visible:
            continue
        members.append(
            PlayerSnapshot(
                id=member.uid,
                room_name=member.player_name,
                volume=member.volume,
                muted=member.mute,
                playback_state=state,
                coordinator_id=coordinator.uid,
                track_no=track_no,
            )
        )

    coordinator_snapshot = next(m for m in members if m.id == coordinator.uid)
    return ZoneSnapshot(
        coordinator=coordinator_snapshot,
        members=tuple(members),
        volume=volume,
        muted=muted,
    )


def _read_zone(group) -> ZoneSnapshot:
    """Build a ZoneSnapshot from a soco ZoneGroup. Blocking; read errors propagate."""
    return _build_zone(group, *_zone_state(group))


def _read_listed_zone(group) -> ZoneSnapshot:
    """Like _read_zone, but a zone whose state can't be read is listed as UNKNOWN."""
    try:
        state = _zone_state(group)
    except (SoCoException, *TRANSIENT_ERRORS) as exc:
        logger.warning("Could not read state of zone %s: %s", group.coordinator.player_name, exc)
        state = (PlaybackState.UNKNOWN, 0, 0, False)
    return _build_zone(group, *state)


def _read_topology(speaker: soco.SoCo) -> ZoneTopologySnapshot:
    speaker.zone_group_state.clear_cache()
    zones = [_read_listed_zone(group) for group in speaker.all_groups if group.coordinator.is_visible]
    return ZoneTopologySnapshot(zones=tuple(zones))


def _read_player_state(speaker: soco.SoCo, room: str) -> PlayerState:
    transport = speaker.get_current_transport_info()
    track = speaker.get_current_track_info()
    return PlayerState(
        room=room,
        state=PlaybackState.parse(transport.get("current_transport_state")).value,
        volume=speaker.volume,
        mute=speaker.mute,
        track_no=int(track.get("playlist_position") or 0),
        play_mode=speaker.play_mode,
        equalizer=EqualizerState(bass=speaker.bass, treble=speaker.treble, loudness=speaker.loudness),
        track=TrackInfo(
            title=track.get("title", ""),
            artist=track.get("artist", ""),
            album=track.get("album", ""),
            album_art=track.get("album_art", ""),
            duration=track.get("duration", ""),
            position=track.get("position", ""),
            uri=track.get("uri", ""),
        ),
    )


class SpeakerManager:
    """Directory of discovered Sonos speakers with background re-discovery.

    The list of devices is refreshed periodically. Zone topology and player
    state are never cached: every read goes to the speakers.
    """

    def __init__(
        self,
        discovery_interval: int = 30,
        discovery_timeout: int = 5,
        retries: int = 1,
        retry_delay: float = 1.0,
    ) -> None:
        self._discovery_interval = discovery_interval
        self._discovery_timeout = discovery_timeout
        self._retries = retries
        self._retry_delay = retry_delay
        self._speakers: dict[str, soco.SoCo] = {}
        self._handles: dict[str, PlayerHandle] = {}
        self._discovery_task: asyncio.Task | None = None

    @property
    def speakers(self) -> dict[str, soco.SoCo]:
        return dict(self._speakers)

    async def start(self) -> None:
        """Run initial discovery and start background task."""
        await self._discover()
        self._discovery_task = asyncio.create_task(self._discovery_loop())

    async def stop(self) -> None:
        """Stop background discovery."""
        if self._discovery_task:
            self._discovery_task.cancel()
            try:
                await self._discovery_task
            except asyncio.CancelledError:
                pass

    async def _discover(self) -> None:
        """Discover Sonos speakers on the network."""
        try:
            devices = await asyncio.to_thread(soco.discover, timeout=self._discovery_timeout)
        except (SoCoException, *TRANSIENT_ERRORS):
            logger.exception("Discovery failed")
            return

        if not devices:
            logger.warning("No Sonos devices found")
            return

        found: dict[str, soco.SoCo] = {}
        handles: dict[str, PlayerHandle] = {}
        for device in devices:
            try:
                name, uid = await asyncio.to_thread(lambda d=device: (d.player_name, d.uid))
            except (SoCoException, *TRANSIENT_ERRORS):
                logger.exception("Failed to get player name for %s", device.ip_address)
                continue
            normalized = normalize_room_name(name)
            found[normalized] = device
            handles[normalized] = PlayerHandle(uid=uid, room_name=name, ip_address=device.ip_address)

        self._speakers = found
        self._handles = handles
        logger.info("Discovered %d speakers: %s", len(found), list(found.keys()))

    async def _discovery_loop(self) -> None:
        """Periodically re-discover speakers."""
        while True:
            await asyncio.sleep(self._discovery_interval)
            await self._discover()

    async def trigger_rediscovery(self) -> None:
        """Trigger an immediate re-discovery (e.g. after a device becomes unreachable)."""
        await self._discover()

    def get(self, room: str) -> soco.SoCo | None:
        """Get a speaker by normalized room name."""
        return self._speakers.get(normalize_room_name(room))

    def _require_speakers(self) -> None:
        if not self._speakers:
            raise DirectoryUnavailableError()

    def _speaker_or_404(self, room: str) -> soco.SoCo:
        self._require_speakers()
        speaker = self.get(room)
        if speaker is None:
            raise RoomNotFoundError(room)
        return speaker

    def resolve(self, room: str) -> PlayerHandle:
        self._require_speakers()
        handle = self._handles.get(normalize_room_name(room))
        if handle is None:
            raise RoomNotFoundError(room)
        return handle

    def handle(self, player_id: str) -> PlayerHandle:
        """Look up a player by its UID."""
        self._require_speakers()
        for handle in self._handles.values():
            if handle.uid == player_id:
                return handle
        raise RoomNotFoundError(player_id)

    def any_handle(self) -> PlayerHandle:
        self._require_speakers()
        return next(iter(self._handles.values()))

    async def _read(self, label: str, func):
        return await run_on_device(func, label=label, retries=self._retries, delay=self._retry_delay)

    async def list_zones(self) -> ZoneTopologySnapshot:
        """Read the full zone topology from the speakers."""
        self._require_speakers()
        speaker = next(iter(self._speakers.values()))
        return await self._read("zones", lambda: _read_topology(speaker))

    async def zone_of(self, room: str) -> ZoneSnapshot:
        """Read the zone that ``room`` currently belongs to."""
        speaker = self._speaker_or_404(room)

        def _zone() -> ZoneSnapshot | None:
            speaker.zone_group_state.clear_cache()
            group = speaker.group
            return _read_zone(group) if group else None

        zone = await self._read(f"{room} zone", _zone)
        if zone is None:
            raise RoomNotFoundError(room)
        return zone

    async def resolve_coordinator(self, room: str) -> PlayerHandle:
        """Handle for the coordinator of the group ``room`` belongs to."""
        speaker = self._speaker_or_404(room)
        coordinator_uid = await self._read(f"{room} coordinator", lambda: speaker.group.coordinator.uid)
        return self.handle(coordinator_uid)

    async def player_state(self, room: str) -> PlayerState:
        speaker = self._speaker_or_404(room)
        handle = self.resolve(room)
        return await self._read(f"{room} state", lambda: _read_player_state(speaker, handle.room_name))
