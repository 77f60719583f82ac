"""Tests for MediaController and title matching."""

import pytest

from sonos_zones.errors import (
    FavoriteNotFoundError,
    InvalidCommandError,
    PlaylistNotFoundError,
    RoomNotFoundError,
    UnsupportedContentTypeError,
)
from sonos_zones.gateway.commands import (
    AddURIToQueue,
    ClearQueue,
    Play,
    PlayFromQueue,
    PlayURI,
    Seek,
    SetAVTransport,
    SetCrossfade,
    SetEqualizer,
    SetPlayMode,
    SetSleepTimer,
)
from sonos_zones.models.state import LibraryItem
from sonos_zones.services.library import MediaController, match_by_title

from conftest import FakeDirectory, FakeHousehold, RecordingGateway, uid_for


@pytest.fixture
def controller(directory: FakeDirectory, gateway: RecordingGateway) -> MediaController:
    return MediaController(directory, gateway)


class TestMatchByTitle:
    items = [
        LibraryItem(title="Jazz Classics"),
        LibraryItem(title="Morning Jazz"),
        LibraryItem(title="Jazz"),
    ]

    def test_exact_match_wins(self) -> None:
        assert match_by_title(self.items, "jazz").title == "Jazz"

    def test_prefix_before_contains(self) -> None:
        assert match_by_title(self.items, "JAZZ C").title == "Jazz Classics"

    def test_contains(self) -> None:
        assert match_by_title(self.items, "ning").title == "Morning Jazz"

    def test_no_match(self) -> None:
        assert match_by_title(self.items, "metal") is None


class TestFavorites:
    @pytest.mark.asyncio
    async def test_play_favorite_on_coordinator(
        self, controller: MediaController, gateway: RecordingGateway
    ) -> None:
        title = await controller.play_favorite("Kitchen", "morning jazz")

        assert title == "Morning Jazz"
        assert gateway.sent == [("Living Room", PlayURI("x-sonosapi-radio:jazz", "<DIDL/>"))]

    @pytest.mark.asyncio
    async def test_favorite_not_found_lists_available(self, controller: MediaController) -> None:
        with pytest.raises(FavoriteNotFoundError) as exc_info:
            await controller.play_favorite("Kitchen", "metal")

        assert "Chill Mix" in exc_info.value.available

    @pytest.mark.asyncio
    async def test_play_playlist_replaces_queue(self, controller: MediaController, gateway: RecordingGateway) -> None:
        title = await controller.play_playlist("Bedroom", "dinner")

        assert title == "Dinner"
        assert [c for _, c in gateway.sent] == [
            ClearQueue(),
            AddURIToQueue("file:///jffs/settings/savedqueues.rsq#3", "<DIDL/>"),
            PlayFromQueue(0),
        ]

    @pytest.mark.asyncio
    async def test_playlist_not_found(self, controller: MediaController) -> None:
        with pytest.raises(PlaylistNotFoundError):
            await controller.play_playlist("Bedroom", "breakfast")


class TestSpotify:
    @pytest.mark.asyncio
    async def test_now_replaces_queue_and_plays(self, controller: MediaController, gateway: RecordingGateway) -> None:
        await controller.spotify("Office", "spotify:album:abc", "now")

        commands = [c for _, c in gateway.sent]
        assert {room for room, _ in gateway.sent} == {"Living Room"}
        assert commands[0] == ClearQueue()
        assert isinstance(commands[1], AddURIToQueue)
        assert commands[1].uri.startswith("x-rincon-cpcontainer:1004206cspotify:album:abc")
        assert commands[2] == Play()

    @pytest.mark.asyncio
    async def test_next_inserts_after_current_track(
        self, controller: MediaController, gateway: RecordingGateway, household: FakeHousehold
    ) -> None:
        household.track_no[uid_for("Living Room")] = 4

        await controller.spotify("Kitchen", "spotify:track:xyz", "next")

        (room, command), = gateway.sent
        assert room == "Living Room"
        assert command.position == 5

    @pytest.mark.asyncio
    async def test_queue_appends(self, controller: MediaController, gateway: RecordingGateway) -> None:
        await controller.spotify("Bedroom", "spotify:track:xyz", "queue")

        (_, command), = gateway.sent
        assert command.position == 0

    @pytest.mark.asyncio
    async def test_unsupported_type_sends_nothing(
        self, controller: MediaController, gateway: RecordingGateway
    ) -> None:
        with pytest.raises(UnsupportedContentTypeError):
            await controller.spotify("Bedroom", "spotify:episode:xyz", "now")

        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_tunein_sets_transport_then_plays(
        self, controller: MediaController, gateway: RecordingGateway
    ) -> None:
        await controller.tunein("Bedroom", "s12345")

        first, second = (c for _, c in gateway.sent)
        assert isinstance(first, SetAVTransport)
        assert first.uri.startswith("x-sonosapi-stream:s12345")
        assert second == Play()


class TestSettings:
    @pytest.mark.asyncio
    async def test_seek_requires_a_target(self, controller: MediaController) -> None:
        with pytest.raises(InvalidCommandError):
            await controller.seek("Bedroom")

    @pytest.mark.asyncio
    async def test_seek_track_and_position(self, controller: MediaController, gateway: RecordingGateway) -> None:
        await controller.seek("Kitchen", track=3, position=3725)

        assert gateway.sent == [("Living Room", PlayFromQueue(2)), ("Living Room", Seek("1:02:05"))]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("value", "expected"), [("off", None), (0, None), ("900", 900), (600, 600)])
    async def test_sleep(self, controller: MediaController, gateway: RecordingGateway, value, expected) -> None:
        assert await controller.sleep("Bedroom", value) == expected
        assert gateway.sent == [("Bedroom", SetSleepTimer(expected))]

    @pytest.mark.asyncio
    async def test_sleep_rejects_garbage(self, controller: MediaController) -> None:
        with pytest.raises(InvalidCommandError):
            await controller.sleep("Bedroom", "later")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("mode", "command"),
        [
            ("normal", SetPlayMode("NORMAL")),
            ("Shuffle", SetPlayMode("SHUFFLE_NOREPEAT")),
            ("repeat_one", SetPlayMode("REPEAT_ONE")),
            ("crossfade", SetCrossfade(True)),
        ],
    )
    async def test_play_mode(self, controller: MediaController, gateway: RecordingGateway, mode, command) -> None:
        await controller.set_play_mode("Bedroom", mode)

        assert gateway.sent == [("Bedroom", command)]

    @pytest.mark.asyncio
    async def test_invalid_play_mode(self, controller: MediaController, gateway: RecordingGateway) -> None:
        with pytest.raises(InvalidCommandError):
            await controller.set_play_mode("Bedroom", "party")
        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_equalizer_clamps_and_targets_player(
        self, controller: MediaController, gateway: RecordingGateway
    ) -> None:
        result = await controller.set_equalizer("Kitchen", bass=14, treble=-12)

        assert result == {"bass": 10, "treble": -10}
        assert gateway.sent == [("Kitchen", SetEqualizer(bass=10, treble=-10))]

    @pytest.mark.asyncio
    async def test_line_in_from_other_room(self, controller: MediaController, gateway: RecordingGateway) -> None:
        source = await controller.line_in("Kitchen", "Bedroom")

        assert source == "Bedroom"
        assert gateway.sent == [("Living Room", SetAVTransport(f"x-rincon-stream:{uid_for('Bedroom')}"))]

    @pytest.mark.asyncio
    async def test_line_in_unknown_source(self, controller: MediaController) -> None:
        with pytest.raises(RoomNotFoundError):
            await controller.line_in("Kitchen", "Turntable")

    @pytest.mark.asyncio
    async def test_reindex_uses_any_player(self, controller: MediaController, gateway: RecordingGateway) -> None:
        await controller.reindex()

        assert gateway.reindexed_on is not None
