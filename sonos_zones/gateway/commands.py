"""Logical commands the gateway knows how to send to a single player.

Commands are plain values. The gateway decides how each one maps onto the
device protocol; callers only decide which player receives which command.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlayerHandle:
    """Addressable reference to one discovered player."""

    uid: str
    room_name: str
    ip_address: str = ""


class Command:
    name = "command"

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class Play(Command):
    name = "play"


@dataclass(frozen=True)
class Pause(Command):
    name = "pause"


@dataclass(frozen=True)
class Next(Command):
    name = "next"


@dataclass(frozen=True)
class Previous(Command):
    name = "previous"


@dataclass(frozen=True)
class Mute(Command):
    name = "mute"


@dataclass(frozen=True)
class Unmute(Command):
    name = "unmute"


@dataclass(frozen=True)
class GroupMute(Command):
    name = "group_mute"


@dataclass(frozen=True)
class GroupUnmute(Command):
    name = "group_unmute"


@dataclass(frozen=True)
class SetVolume(Command):
    volume: int
    name = "set_volume"

    def describe(self) -> str:
        return f"{self.name}({self.volume})"


@dataclass(frozen=True)
class SetGroupVolume(Command):
    volume: int
    name = "set_group_volume"

    def describe(self) -> str:
        return f"{self.name}({self.volume})"


@dataclass(frozen=True)
class Join(Command):
    coordinator_id: str
    name = "join"

    def describe(self) -> str:
        return f"{self.name}({self.coordinator_id})"


@dataclass(frozen=True)
class Leave(Command):
    name = "leave"


@dataclass(frozen=True)
class SetAVTransport(Command):
    uri: str
    metadata: str = ""
    name = "set_av_transport"

    def describe(self) -> str:
        return f"{self.name}({self.uri})"


@dataclass(frozen=True)
class PlayURI(Command):
    uri: str
    metadata: str = ""
    name = "play_uri"

    def describe(self) -> str:
        return f"{self.name}({self.uri})"


@dataclass(frozen=True)
class AddURIToQueue(Command):
    uri: str
    metadata: str = ""
    position: int = 0  # 0 appends
    name = "add_uri_to_queue"

    def describe(self) -> str:
        return f"{self.name}({self.uri}, position={self.position})"


@dataclass(frozen=True)
class ClearQueue(Command):
    name = "clear_queue"


@dataclass(frozen=True)
class PlayFromQueue(Command):
    index: int  # 0-based
    name = "play_from_queue"

    def describe(self) -> str:
        return f"{self.name}({self.index})"


@dataclass(frozen=True)
class Seek(Command):
    position: str  # H:MM:SS
    name = "seek"

    def describe(self) -> str:
        return f"{self.name}({self.position})"


@dataclass(frozen=True)
class SetSleepTimer(Command):
    seconds: int | None  # None cancels
    name = "set_sleep_timer"


@dataclass(frozen=True)
class SetPlayMode(Command):
    mode: str  # NORMAL, REPEAT_ALL, SHUFFLE, SHUFFLE_NOREPEAT, REPEAT_ONE, SHUFFLE_REPEAT_ONE
    name = "set_play_mode"

    def describe(self) -> str:
        return f"{self.name}({self.mode})"


@dataclass(frozen=True)
class SetCrossfade(Command):
    enabled: bool
    name = "set_crossfade"


@dataclass(frozen=True)
class SetEqualizer(Command):
    bass: int | None = None
    treble: int | None = None
    loudness: bool | None = None
    name = "set_equalizer"
