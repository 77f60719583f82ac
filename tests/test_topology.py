"""Tests for the topology data model."""

from sonos_zones.models.state import ZoneInfo
from sonos_zones.models.topology import DesiredGrouping, PlaybackState

from conftest import FakeHousehold, uid_for


class TestPlaybackState:
    def test_parse_known(self) -> None:
        assert PlaybackState.parse("PAUSED_PLAYBACK") is PlaybackState.PAUSED_PLAYBACK

    def test_parse_unknown(self) -> None:
        assert PlaybackState.parse("BUFFERING") is PlaybackState.UNKNOWN
        assert PlaybackState.parse(None) is PlaybackState.UNKNOWN


class TestZoneTopologySnapshot:
    def test_every_player_in_exactly_one_zone(self, household: FakeHousehold) -> None:
        snapshot = household.snapshot()

        ids = [p.id for p in snapshot.players]
        assert len(ids) == len(set(ids)) == 5

    def test_lookups(self, household: FakeHousehold) -> None:
        snapshot = household.snapshot()

        assert snapshot.find_zone_by_coordinator("living room").uuid == uid_for("Living Room")
        assert snapshot.find_zone_by_coordinator("Kitchen") is None
        assert snapshot.zone_of("Kitchen").coordinator.room_name == "Living Room"
        assert snapshot.find_player("OFFICE").coordinator_id == uid_for("Living Room")
        assert snapshot.find_player("Garage") is None

    def test_standalone(self, household: FakeHousehold) -> None:
        snapshot = household.snapshot()

        assert snapshot.find_zone_by_coordinator("Bedroom").is_standalone
        assert not snapshot.find_zone_by_coordinator("Living Room").is_standalone

    def test_coordinator_flag(self, household: FakeHousehold) -> None:
        zone = household.snapshot().find_zone_by_coordinator("Living Room")

        assert zone.coordinator.is_coordinator
        assert [m.room_name for m in zone.members if not m.is_coordinator] == ["Kitchen", "Office"]

    def test_zone_info(self, household: FakeHousehold) -> None:
        info = ZoneInfo.from_snapshot(household.snapshot().find_zone_by_coordinator("Living Room"))

        assert info.coordinator == "Living Room"
        assert info.state == "STOPPED"
        assert [m.room for m in info.members] == ["Living Room", "Kitchen", "Office"]


class TestDesiredGrouping:
    def test_dedupes_preserving_order(self) -> None:
        desired = DesiredGrouping(coordinator_room="Kitchen", member_rooms=["Kitchen", "Office", "kitchen", "Den"])

        assert desired.member_rooms == ("Kitchen", "Office", "Den")
        assert desired.is_applicable

    def test_single_room_not_applicable(self) -> None:
        assert not DesiredGrouping(coordinator_room="Kitchen", member_rooms=["Kitchen"]).is_applicable
