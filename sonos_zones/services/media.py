"""Translate service content identifiers into Sonos transport URIs.

Everything here is a pure function of its input: no network, no state.
"""

from typing import NamedTuple
from xml.sax.saxutils import escape

from sonos_zones.errors import UnsupportedContentTypeError

SPOTIFY_SERVICE_DESC = "SA_RINCON2311_X_#Svc2311-0-Token"
TUNEIN_SERVICE_DESC = "SA_RINCON65031_"

_SPOTIFY_URIS = {
    "track": "x-sonos-spotify:spotify:track:{id}?sid=9&flags=8224&sn=9",
    "album": "x-rincon-cpcontainer:1004206cspotify:album:{id}?sid=9&flags=8300&sn=9",
    "artist": "x-rincon-cpcontainer:1004206cspotify:artist:{id}?sid=9&flags=8300&sn=9",
    "playlist": "x-rincon-cpcontainer:1006206cspotify:playlist:{id}?sid=9&flags=8300&sn=9",
}

_UPNP_CLASSES = {
    "track": "object.item.audioItem.musicTrack",
    "album": "object.container.album.musicAlbum",
    "artist": "object.container.person.musicArtist",
    "playlist": "object.container.playlistContainer",
}

_DIDL = (
    '<DIDL-Lite xmlns:dc="http://purl.org/dc/elements/1.1/" '
    'xmlns:upnp="urn:schemas-upnp-org:metadata-1-0/upnp/" '
    'xmlns:r="urn:schemas-rinconnetworks-com:metadata-1-0/" '
    'xmlns="urn:schemas-upnp-org:metadata-1-0/DIDL-Lite/">'
    '<{tag} id="{item_id}" parentID="{parent_id}" restricted="true">'
    "<dc:title>{title}</dc:title>"
    "<upnp:class>{upnp_class}</upnp:class>"
    '<desc id="cdudn" nameSpace="urn:schemas-rinconnetworks-com:metadata-1-0/">{desc}</desc>'
    "</{tag}>"
    "</DIDL-Lite>"
)


class TranslatedMedia(NamedTuple):
    uri: str
    metadata: str


def _didl(item_id: str, upnp_class: str, desc: str, title: str = "", parent_id: str = "-1") -> str:
    tag = "item" if upnp_class.startswith("object.item") else "container"
    return _DIDL.format(
        tag=tag,
        item_id=escape(item_id, {'"': "&quot;"}),
        parent_id=escape(parent_id, {'"': "&quot;"}),
        title=escape(title),
        upnp_class=upnp_class,
        desc=desc,
    )


def parse_service_uri(service_uri: str) -> tuple[str, str]:
    """Split ``service:type:id`` into (type, id).

    Type and id are the last two segments, so legacy forms such as
    ``spotify:user:someone:playlist:id`` resolve the same way.
    """
    parts = service_uri.split(":")
    if len(parts) < 3 or not parts[-1]:
        raise UnsupportedContentTypeError(parts[-2] if len(parts) >= 2 else "", service_uri)
    return parts[-2], parts[-1]


def translate(service_uri: str) -> TranslatedMedia:
    """Map a compact service URI to a native URI and a DIDL-Lite descriptor."""
    content_type, content_id = parse_service_uri(service_uri)
    template = _SPOTIFY_URIS.get(content_type)
    if template is None:
        raise UnsupportedContentTypeError(content_type, service_uri)

    metadata = _didl(
        item_id=service_uri,
        upnp_class=_UPNP_CLASSES[content_type],
        desc=SPOTIFY_SERVICE_DESC,
    )
    return TranslatedMedia(template.format(id=content_id), metadata)


def tunein(station_id: str | int) -> TranslatedMedia:
    station = str(station_id)
    uri = f"x-sonosapi-stream:{station}?sid=254&flags=8224&sn=0"
    metadata = _didl(
        item_id="R:0/0/0",
        parent_id="R:0/0",
        upnp_class="object.item.audioItem.audioBroadcast",
        desc=TUNEIN_SERVICE_DESC,
        title="TuneIn",
    )
    return TranslatedMedia(uri, metadata)


def line_in(source_player_id: str) -> str:
    return f"x-rincon-stream:{source_player_id}"
