from typing import Protocol

from sonos_zones.gateway.commands import Command, PlayerHandle
from sonos_zones.models.state import LibraryItem, PlayerState
from sonos_zones.models.topology import ZoneSnapshot, ZoneTopologySnapshot


class PlayerDirectory(Protocol):
    """Live knowledge of players and zones."""

    async def list_zones(self) -> ZoneTopologySnapshot: ...

    async def zone_of(self, room: str) -> ZoneSnapshot: ...

    async def resolve_coordinator(self, room: str) -> PlayerHandle: ...

    async def player_state(self, room: str) -> PlayerState: ...

    def resolve(self, room: str) -> PlayerHandle: ...

    def handle(self, player_id: str) -> PlayerHandle: ...

    def any_handle(self) -> PlayerHandle: ...


class CommandGateway(Protocol):
    """Executes one logical command against one physical player."""

    async def send(self, handle: PlayerHandle, command: Command) -> None: ...

    async def favorites(self, handle: PlayerHandle) -> list[LibraryItem]: ...

    async def playlists(self, handle: PlayerHandle) -> list[LibraryItem]: ...

    async def queue(self, handle: PlayerHandle, limit: int = 500) -> list[LibraryItem]: ...

    async def music_services(self, handle: PlayerHandle) -> list[str]: ...

    async def reindex(self, handle: PlayerHandle) -> None: ...
