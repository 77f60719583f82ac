from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from sonos_zones.utils.speaker import same_room


class PlaybackState(str, Enum):
    PLAYING = "PLAYING"
    PAUSED_PLAYBACK = "PAUSED_PLAYBACK"
    STOPPED = "STOPPED"
    TRANSITIONING = "TRANSITIONING"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "PlaybackState":
        try:
            return cls(value or "UNKNOWN")
        except ValueError:
            return cls.UNKNOWN


class PlayerSnapshot(BaseModel):
    """One player as seen at the instant the topology was read."""

    model_config = ConfigDict(frozen=True)

    id: str
    room_name: str
    volume: int = 0
    muted: bool = False
    playback_state: PlaybackState = PlaybackState.UNKNOWN
    coordinator_id: str
    track_no: int = 0

    @property
    def is_coordinator(self) -> bool:
        return self.coordinator_id == self.id


class ZoneSnapshot(BaseModel):
    """A coordinator and the players following it.

    ``members`` is the full membership and includes the coordinator.
    ``volume`` and ``muted`` are the group-level values.
    """

    model_config = ConfigDict(frozen=True)

    coordinator: PlayerSnapshot
    members: tuple[PlayerSnapshot, ...] = ()
    volume: int = 0
    muted: bool = False

    @property
    def uuid(self) -> str:
        return self.coordinator.id

    @property
    def is_standalone(self) -> bool:
        return all(m.id == self.coordinator.id for m in self.members)

    def has_member(self, room: str) -> bool:
        return any(same_room(m.room_name, room) for m in self.members)


class ZoneTopologySnapshot(BaseModel):
    """Every zone in the household at one instant. Discarded after use."""

    model_config = ConfigDict(frozen=True)

    zones: tuple[ZoneSnapshot, ...] = ()

    @property
    def players(self) -> list[PlayerSnapshot]:
        return [m for zone in self.zones for m in zone.members]

    def find_zone_by_coordinator(self, room: str) -> ZoneSnapshot | None:
        for zone in self.zones:
            if same_room(zone.coordinator.room_name, room):
                return zone
        return None

    def zone_of(self, room: str) -> ZoneSnapshot | None:
        for zone in self.zones:
            if zone.has_member(room):
                return zone
        return None

    def find_player(self, room: str) -> PlayerSnapshot | None:
        for player in self.players:
            if same_room(player.room_name, room):
                return player
        return None


class DesiredGrouping(BaseModel):
    """Caller intent: which rooms should play together under which coordinator."""

    model_config = ConfigDict(frozen=True)

    coordinator_room: str
    member_rooms: tuple[str, ...]

    @field_validator("member_rooms", mode="before")
    @classmethod
    def _dedupe(cls, value):
        seen: list[str] = []
        for room in value:
            if not any(same_room(room, s) for s in seen):
                seen.append(room)
        return tuple(seen)

    @property
    def is_applicable(self) -> bool:
        return len(self.member_rooms) > 1
