class SonosZonesError(Exception):
    """Base class for errors raised by the zone control core."""


class NotFoundError(SonosZonesError):
    """A named thing does not resolve to anything the system knows about."""

    kind = "Not found"

    def __init__(self, name: str) -> None:
        super().__init__(f"{self.kind}: {name}")
        self.name = name


class RoomNotFoundError(NotFoundError):
    kind = "Room not found"


class FavoriteNotFoundError(NotFoundError):
    kind = "Favorite not found"

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        super().__init__(name)
        self.available = available or []


class PlaylistNotFoundError(FavoriteNotFoundError):
    kind = "Playlist not found"


class DirectoryUnavailableError(SonosZonesError):
    """No topology can be read because no players have been discovered."""

    def __init__(self, detail: str = "No speakers have been discovered") -> None:
        super().__init__(detail)


class DeviceError(SonosZonesError):
    """A physical device rejected or failed a command."""

    def __init__(self, code: str, detail: str = "") -> None:
        super().__init__(f"[{code}] {detail}" if detail else code)
        self.code = code
        self.detail = detail


class DeviceUnreachableError(DeviceError):
    def __init__(self, detail: str = "") -> None:
        super().__init__("unreachable", detail)


class UnsupportedContentTypeError(SonosZonesError):
    def __init__(self, content_type: str, uri: str = "") -> None:
        super().__init__(f"Unsupported content type '{content_type}' in '{uri}'")
        self.content_type = content_type
        self.uri = uri


class InvalidCommandError(SonosZonesError):
    """A request argument is outside the accepted vocabulary."""
