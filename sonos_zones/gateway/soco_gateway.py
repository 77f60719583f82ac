import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

import soco
from soco.data_structures import to_didl_string
from soco.exceptions import SoCoException, SoCoUPnPException
from soco.music_services import MusicService

from sonos_zones.errors import DeviceError, DeviceUnreachableError, InvalidCommandError
from sonos_zones.gateway.commands import (
    AddURIToQueue,
    ClearQueue,
    Command,
    GroupMute,
    GroupUnmute,
    Join,
    Leave,
    Mute,
    Next,
    Pause,
    Play,
    PlayerHandle,
    PlayFromQueue,
    PlayURI,
    Previous,
    Seek,
    SetAVTransport,
    SetCrossfade,
    SetEqualizer,
    SetGroupVolume,
    SetPlayMode,
    SetSleepTimer,
    SetVolume,
    Unmute,
)
from sonos_zones.models.state import LibraryItem
from sonos_zones.utils.retry import TRANSIENT_ERRORS, retry_soco

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_on_device(
    func: Callable[[], T],
    *,
    label: str,
    retries: int = 1,
    delay: float = 1.0,
) -> T:
    """Run a blocking SoCo call in a worker thread.

    Transient network failures are retried; everything that still fails is
    re-raised as a DeviceError so soco types never leave the gateway.
    """

    @retry_soco(max_retries=retries, delay=delay)
    async def _run() -> T:
        return await asyncio.to_thread(func)

    try:
        return await _run()
    except SoCoUPnPException as exc:
        raise DeviceError(str(exc.error_code), f"{label}: {exc.error_description or exc}") from exc
    except SoCoException as exc:
        raise DeviceError("error", f"{label}: {exc}") from exc
    except TRANSIENT_ERRORS as exc:
        raise DeviceUnreachableError(f"{label}: {exc}") from exc


def _first_resource_uri(item) -> str:
    resources = getattr(item, "resources", None) or []
    return resources[0].uri if resources else ""


class SocoGateway:
    """Sends logical commands to individual speakers over UPnP via SoCo."""

    def __init__(self, retries: int = 1, retry_delay: float = 1.0) -> None:
        self._retries = retries
        self._retry_delay = retry_delay

    def _device(self, handle: PlayerHandle) -> soco.SoCo:
        return soco.SoCo(handle.ip_address)

    async def _run(self, handle: PlayerHandle, func: Callable[[], T], label: str) -> T:
        return await run_on_device(
            func,
            label=f"{handle.room_name} {label}",
            retries=self._retries,
            delay=self._retry_delay,
        )

    async def send(self, handle: PlayerHandle, command: Command) -> None:
        """Execute one command against one player."""
        device = self._device(handle)
        logger.debug("Sending %s to %s", command.describe(), handle.room_name)
        await self._run(handle, lambda: self._apply(device, command), command.describe())

    @staticmethod
    def _apply(device: soco.SoCo, command: Command) -> None:
        match command:
            case Play():
                device.play()
            case Pause():
                device.pause()
            case Next():
                device.next()
            case Previous():
                device.previous()
            case Mute():
                device.mute = True
            case Unmute():
                device.mute = False
            case GroupMute():
                device.group.mute = True
            case GroupUnmute():
                device.group.mute = False
            case SetVolume(volume=volume):
                device.volume = volume
            case SetGroupVolume(volume=volume):
                device.group.volume = volume
            case Join(coordinator_id=coordinator_id):
                device.avTransport.SetAVTransportURI(
                    [
                        ("InstanceID", 0),
                        ("CurrentURI", f"x-rincon:{coordinator_id}"),
                        ("CurrentURIMetaData", ""),
                    ]
                )
                device.zone_group_state.clear_cache()
            case Leave():
                device.unjoin()
            case SetAVTransport(uri=uri, metadata=metadata):
                device.avTransport.SetAVTransportURI(
                    [("InstanceID", 0), ("CurrentURI", uri), ("CurrentURIMetaData", metadata)]
                )
            case PlayURI(uri=uri, metadata=metadata):
                device.play_uri(uri, metadata)
            case AddURIToQueue(uri=uri, metadata=metadata, position=position):
                device.avTransport.AddURIToQueue(
                    [
                        ("InstanceID", 0),
                        ("EnqueuedURI", uri),
                        ("EnqueuedURIMetaData", metadata),
                        ("DesiredFirstTrackNumberEnqueued", position),
                        ("EnqueueAsNext", 0),
                    ]
                )
            case ClearQueue():
                device.clear_queue()
            case PlayFromQueue(index=index):
                device.play_from_queue(index)
            case Seek(position=position):
                device.seek(position)
            case SetSleepTimer(seconds=seconds):
                device.set_sleep_timer(seconds)
            case SetPlayMode(mode=mode):
                device.play_mode = mode
            case SetCrossfade(enabled=enabled):
                device.cross_fade = enabled
            case SetEqualizer(bass=bass, treble=treble, loudness=loudness):
                if bass is not None:
                    device.bass = bass
                if treble is not None:
                    device.treble = treble
                if loudness is not None:
                    device.loudness = loudness
            case _:
                raise InvalidCommandError(f"Unsupported command: {command!r}")

    # Library reads

    async def favorites(self, handle: PlayerHandle) -> list[LibraryItem]:
        device = self._device(handle)

        def _read() -> list[LibraryItem]:
            return [
                LibraryItem(
                    title=getattr(fav, "title", ""),
                    uri=_first_resource_uri(fav),
                    metadata=getattr(fav, "resource_meta_data", "") or "",
                )
                for fav in device.music_library.get_sonos_favorites()
            ]

        return await self._run(handle, _read, "favorites")

    async def playlists(self, handle: PlayerHandle) -> list[LibraryItem]:
        device = self._device(handle)

        def _read() -> list[LibraryItem]:
            return [
                LibraryItem(
                    title=getattr(playlist, "title", ""),
                    uri=_first_resource_uri(playlist),
                    metadata=to_didl_string(playlist),
                )
                for playlist in device.get_sonos_playlists()
            ]

        return await self._run(handle, _read, "playlists")

    async def queue(self, handle: PlayerHandle, limit: int = 500) -> list[LibraryItem]:
        device = self._device(handle)

        def _read() -> list[LibraryItem]:
            return [
                LibraryItem(
                    title=getattr(item, "title", ""),
                    artist=getattr(item, "creator", "") or "",
                    album=getattr(item, "album", "") or "",
                    album_art=getattr(item, "album_art_uri", "") or "",
                    uri=_first_resource_uri(item),
                )
                for item in device.get_queue(max_items=limit)
            ]

        return await self._run(handle, _read, "queue")

    async def music_services(self, handle: PlayerHandle) -> list[str]:
        return await self._run(handle, MusicService.get_all_music_services_names, "music services")

    async def reindex(self, handle: PlayerHandle) -> None:
        device = self._device(handle)
        await self._run(handle, device.music_library.start_library_update, "reindex")
