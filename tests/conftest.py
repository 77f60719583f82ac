"""In-memory stand-ins for the player directory and command gateway."""

from dataclasses import dataclass, field

import pytest

from sonos_zones.errors import DeviceError, DirectoryUnavailableError, RoomNotFoundError
from sonos_zones.gateway.commands import (
    AddURIToQueue,
    ClearQueue,
    Command,
    GroupMute,
    GroupUnmute,
    Join,
    Leave,
    Mute,
    Pause,
    Play,
    PlayerHandle,
    PlayFromQueue,
    PlayURI,
    SetGroupVolume,
    SetVolume,
    Unmute,
)
from sonos_zones.models.state import LibraryItem, PlayerState
from sonos_zones.models.topology import (
    PlaybackState,
    PlayerSnapshot,
    ZoneSnapshot,
    ZoneTopologySnapshot,
)
from sonos_zones.utils.speaker import same_room


def uid_for(room: str) -> str:
    return "RINCON_" + room.upper().replace(" ", "")


@dataclass
class FakePlayer:
    uid: str
    room: str
    coordinator: str
    volume: int = 20
    muted: bool = False


@dataclass
class FakeHousehold:
    """Mutable model of a Sonos household that the fakes read and write."""

    players: dict[str, FakePlayer] = field(default_factory=dict)
    states: dict[str, PlaybackState] = field(default_factory=dict)
    group_volumes: dict[str, int] = field(default_factory=dict)
    track_no: dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(cls, zones: dict[str, list[str]]) -> "FakeHousehold":
        """``zones`` maps a coordinator room to its other member rooms."""
        household = cls()
        for coordinator, members in zones.items():
            coord_uid = uid_for(coordinator)
            for room in [coordinator, *members]:
                household.players[uid_for(room)] = FakePlayer(uid=uid_for(room), room=room, coordinator=coord_uid)
            household.states[coord_uid] = PlaybackState.STOPPED
            household.group_volumes[coord_uid] = 20
            household.track_no[coord_uid] = 1
        return household

    def find(self, room: str) -> FakePlayer | None:
        for player in self.players.values():
            if same_room(player.room, room):
                return player
        return None

    def snapshot(self) -> ZoneTopologySnapshot:
        zones = []
        for coord_uid in sorted({p.coordinator for p in self.players.values()}):
            members = tuple(
                PlayerSnapshot(
                    id=p.uid,
                    room_name=p.room,
                    volume=p.volume,
                    muted=p.muted,
                    playback_state=self.states.get(coord_uid, PlaybackState.STOPPED),
                    coordinator_id=coord_uid,
                    track_no=self.track_no.get(coord_uid, 0),
                )
                for p in self.players.values()
                if p.coordinator == coord_uid
            )
            coordinator = next(m for m in members if m.id == coord_uid)
            zones.append(
                ZoneSnapshot(
                    coordinator=coordinator,
                    members=members,
                    volume=self.group_volumes.get(coord_uid, 0),
                )
            )
        return ZoneTopologySnapshot(zones=tuple(zones))

    def groups(self) -> dict[str, set[str]]:
        """Coordinator room -> member rooms (including the coordinator)."""
        result: dict[str, set[str]] = {}
        for player in self.players.values():
            coordinator = self.players[player.coordinator].room
            result.setdefault(coordinator, set()).add(player.room)
        return result


class FakeDirectory:
    def __init__(self, household: FakeHousehold) -> None:
        self.household = household
        self.zone_reads = 0

    @property
    def speakers(self) -> dict:
        return {p.room: p for p in self.household.players.values()}

    def _require(self) -> None:
        if not self.household.players:
            raise DirectoryUnavailableError()

    def resolve(self, room: str) -> PlayerHandle:
        self._require()
        player = self.household.find(room)
        if player is None:
            raise RoomNotFoundError(room)
        return PlayerHandle(uid=player.uid, room_name=player.room)

    def handle(self, player_id: str) -> PlayerHandle:
        self._require()
        player = self.household.players.get(player_id)
        if player is None:
            raise RoomNotFoundError(player_id)
        return PlayerHandle(uid=player.uid, room_name=player.room)

    def any_handle(self) -> PlayerHandle:
        self._require()
        return self.handle(next(iter(self.household.players)))

    async def list_zones(self) -> ZoneTopologySnapshot:
        self._require()
        self.zone_reads += 1
        return self.household.snapshot()

    async def zone_of(self, room: str) -> ZoneSnapshot:
        self.resolve(room)
        return self.household.snapshot().zone_of(room)

    async def resolve_coordinator(self, room: str) -> PlayerHandle:
        handle = self.resolve(room)
        return self.handle(self.household.players[handle.uid].coordinator)

    async def player_state(self, room: str) -> PlayerState:
        handle = self.resolve(room)
        player = self.household.players[handle.uid]
        return PlayerState(
            room=player.room,
            state=self.household.states[player.coordinator].value,
            volume=player.volume,
            mute=player.muted,
        )


class RecordingGateway:
    """Records every command and applies its effect to the household."""

    def __init__(self, household: FakeHousehold, fail_on: set[tuple[str, str]] | None = None) -> None:
        self.household = household
        self.sent: list[tuple[str, Command]] = []
        self.fail_on = fail_on or set()
        self.reindexed_on: str | None = None
        self.favorite_items = [
            LibraryItem(title="Morning Jazz", uri="x-sonosapi-radio:jazz", metadata="<DIDL/>"),
            LibraryItem(title="Jazz Classics", uri="x-rincon-cpcontainer:classics", metadata="<DIDL/>"),
            LibraryItem(title="Chill Mix", uri="x-rincon-cpcontainer:chill", metadata="<DIDL/>"),
        ]
        self.playlist_items = [
            LibraryItem(title="Dinner", uri="file:///jffs/settings/savedqueues.rsq#3", metadata="<DIDL/>"),
        ]
        self.queue_items = [
            LibraryItem(title="So What", artist="Miles Davis", album="Kind of Blue", uri="x-file:1"),
            LibraryItem(title="Blue in Green", artist="Miles Davis", album="Kind of Blue", uri="x-file:2"),
        ]

    def commands_for(self, room: str) -> list[Command]:
        return [c for r, c in self.sent if same_room(r, room)]

    def names(self) -> list[tuple[str, str]]:
        return [(room, command.name) for room, command in self.sent]

    async def send(self, handle: PlayerHandle, command: Command) -> None:
        if (handle.room_name, command.name) in self.fail_on:
            raise DeviceError("701", f"{handle.room_name} rejected {command.name}")
        self.sent.append((handle.room_name, command))
        self._apply(self.household.players[handle.uid], command)

    def _detach(self, player: FakePlayer) -> None:
        """Make ``player`` standalone; a coordinator hands its group to a follower."""
        household = self.household
        if player.coordinator == player.uid:
            followers = [p for p in household.players.values() if p.coordinator == player.uid and p is not player]
            if followers:
                new_coordinator = followers[0].uid
                for follower in followers:
                    follower.coordinator = new_coordinator
                household.states[new_coordinator] = household.states[player.uid]
                household.group_volumes[new_coordinator] = household.group_volumes[player.uid]
        else:
            player.coordinator = player.uid
            household.states[player.uid] = PlaybackState.STOPPED
        household.group_volumes[player.uid] = player.volume

    def _apply(self, player: FakePlayer, command: Command) -> None:
        household = self.household
        match command:
            case Play() | PlayURI() | PlayFromQueue():
                household.states[player.coordinator] = PlaybackState.PLAYING
            case Pause():
                household.states[player.coordinator] = PlaybackState.PAUSED_PLAYBACK
            case SetVolume(volume=volume):
                player.volume = volume
            case SetGroupVolume(volume=volume):
                household.group_volumes[player.coordinator] = volume
            case Mute():
                player.muted = True
            case Unmute():
                player.muted = False
            case Leave():
                self._detach(player)
            case Join(coordinator_id=coordinator_id):
                self._detach(player)
                player.coordinator = coordinator_id
            case GroupMute() | GroupUnmute() | AddURIToQueue() | ClearQueue():
                pass

    async def favorites(self, handle: PlayerHandle) -> list[LibraryItem]:
        return list(self.favorite_items)

    async def playlists(self, handle: PlayerHandle) -> list[LibraryItem]:
        return list(self.playlist_items)

    async def queue(self, handle: PlayerHandle, limit: int = 500) -> list[LibraryItem]:
        return self.queue_items[:limit]

    async def music_services(self, handle: PlayerHandle) -> list[str]:
        return ["Spotify", "TuneIn"]

    async def reindex(self, handle: PlayerHandle) -> None:
        self.reindexed_on = handle.room_name


@pytest.fixture
def household() -> FakeHousehold:
    """Living Room leads Kitchen and Office; Bedroom and Bathroom stand alone."""
    return FakeHousehold.build(
        {
            "Living Room": ["Kitchen", "Office"],
            "Bedroom": [],
            "Bathroom": [],
        }
    )


@pytest.fixture
def directory(household: FakeHousehold) -> FakeDirectory:
    return FakeDirectory(household)


@pytest.fixture
def gateway(household: FakeHousehold) -> RecordingGateway:
    return RecordingGateway(household)
