import re


def normalize_room_name(name: str) -> str:
    """Normalize a room name for URL matching.

    Lowercase, strip leading/trailing whitespace,
    collapse whitespace and replace with underscores.
    """
    name = name.strip().lower()
    name = re.sub(r"\s+", "_", name)
    return name


def same_room(a: str, b: str) -> bool:
    return normalize_room_name(a) == normalize_room_name(b)


def format_seek_position(seconds: int) -> str:
    """Format elapsed seconds as the H:MM:SS timestamp the transport expects."""
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h}:{m:02d}:{s:02d}"
