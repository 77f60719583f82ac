from pydantic import BaseModel

from sonos_zones.models.topology import ZoneSnapshot


class TrackInfo(BaseModel):
    title: str = ""
    artist: str = ""
    album: str = ""
    album_art: str = ""
    duration: str = ""
    position: str = ""
    uri: str = ""


class EqualizerState(BaseModel):
    bass: int = 0
    treble: int = 0
    loudness: bool = False


class PlayerState(BaseModel):
    room: str
    state: str  # PLAYING, PAUSED_PLAYBACK, STOPPED, TRANSITIONING
    volume: int
    mute: bool
    track_no: int = 0
    play_mode: str = "NORMAL"
    equalizer: EqualizerState = EqualizerState()
    track: TrackInfo = TrackInfo()


class MemberInfo(BaseModel):
    room: str
    uuid: str
    volume: int = 0
    mute: bool = False


class ZoneInfo(BaseModel):
    coordinator: str
    uuid: str
    members: list[MemberInfo]
    state: str
    volume: int
    mute: bool = False

    @classmethod
    def from_snapshot(cls, zone: ZoneSnapshot) -> "ZoneInfo":
        return cls(
            coordinator=zone.coordinator.room_name,
            uuid=zone.uuid,
            members=[
                MemberInfo(room=m.room_name, uuid=m.id, volume=m.volume, mute=m.muted)
                for m in zone.members
            ],
            state=zone.coordinator.playback_state.value,
            volume=zone.volume,
            mute=zone.muted,
        )


class LibraryItem(BaseModel):
    """A favorite, playlist or queue entry with what is needed to play it."""

    title: str
    uri: str = ""
    metadata: str = ""
    artist: str = ""
    album: str = ""
    album_art: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"
    speakers: int = 0
    timestamp: str = ""
