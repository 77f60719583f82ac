"""Converge the live zone topology toward a requested grouping.

The topology is read once per call and is already stale when acted on:
other controllers (phone apps, buttons) may regroup players at any time.
Nothing here tries to prevent that. A pass issues the operations that the
snapshot says are needed, in an order that is valid for the devices.
"""

from dataclasses import dataclass

import structlog

from sonos_zones.core.interfaces import CommandGateway, PlayerDirectory
from sonos_zones.gateway.commands import Command, Join, Leave, SetVolume
from sonos_zones.models.topology import DesiredGrouping, ZoneTopologySnapshot
from sonos_zones.utils.speaker import same_room

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReconcilePlan:
    """Operations needed to move one snapshot toward a desired grouping.

    ``deferred_joins`` lists rooms missing from a zone the coordinator
    already heads. They are reported but never joined, so repeating the
    pass leaves them where they are.
    """

    coordinator_room: str
    coordinator_exists: bool
    leaves: tuple[str, ...] = ()
    joins: tuple[str, ...] = ()
    deferred_joins: tuple[str, ...] = ()
    volume_rooms: tuple[str, ...] = ()

    @property
    def command_count(self) -> int:
        return len(self.leaves) + len(self.joins) + len(self.volume_rooms)


def plan_grouping(snapshot: ZoneTopologySnapshot, desired: DesiredGrouping) -> ReconcilePlan:
    coordinator_room = desired.coordinator_room
    others = tuple(r for r in desired.member_rooms if not same_room(r, coordinator_room))
    zone = snapshot.find_zone_by_coordinator(coordinator_room)

    if zone is not None:
        leaves = tuple(
            m.room_name
            for m in zone.members
            if m.id != zone.coordinator.id
            and not any(same_room(m.room_name, r) for r in desired.member_rooms)
        )
        deferred = tuple(r for r in others if not zone.has_member(r))
        return ReconcilePlan(
            coordinator_room=coordinator_room,
            coordinator_exists=True,
            leaves=leaves,
            deferred_joins=deferred,
            volume_rooms=desired.member_rooms,
        )

    # The coordinator must stand alone before anyone can join it
    return ReconcilePlan(
        coordinator_room=coordinator_room,
        coordinator_exists=False,
        leaves=(coordinator_room,),
        joins=others,
        volume_rooms=desired.member_rooms,
    )


class ZoneReconciler:
    """Applies desired groupings against the live player population."""

    def __init__(
        self,
        directory: PlayerDirectory,
        gateway: CommandGateway,
        baseline_volume: int = 10,
    ) -> None:
        self._directory = directory
        self._gateway = gateway
        self._baseline_volume = baseline_volume

    async def reconcile(self, desired: DesiredGrouping) -> str | None:
        """Group ``desired.member_rooms`` under ``desired.coordinator_room``.

        Returns the coordinator room, or None when fewer than two rooms were
        requested. The first failing command aborts the pass and propagates;
        commands already issued are not rolled back.
        """
        if not desired.is_applicable:
            logger.info("grouping_not_applicable", coordinator=desired.coordinator_room, rooms=list(desired.member_rooms))
            return None

        snapshot = await self._directory.list_zones()
        plan = plan_grouping(snapshot, desired)
        logger.info(
            "grouping_plan",
            coordinator=plan.coordinator_room,
            coordinator_exists=plan.coordinator_exists,
            leaves=list(plan.leaves),
            joins=list(plan.joins),
            deferred_joins=list(plan.deferred_joins),
        )
        await self.apply(plan)
        return desired.coordinator_room

    async def apply(self, plan: ReconcilePlan) -> None:
        for room in plan.leaves:
            await self._send(room, Leave())

        if plan.joins:
            coordinator = self._directory.resolve(plan.coordinator_room)
            for room in plan.joins:
                await self._send(room, Join(coordinator.uid))

        for room in plan.volume_rooms:
            await self._send(room, SetVolume(self._baseline_volume))

    async def group_all(self, coordinator_room: str) -> str | None:
        """Group every known player under ``coordinator_room``."""
        snapshot = await self._directory.list_zones()
        rooms = tuple(p.room_name for p in snapshot.players)
        return await self.reconcile(DesiredGrouping(coordinator_room=coordinator_room, member_rooms=rooms))

    async def join(self, room: str, coordinator_room: str) -> None:
        handle = self._directory.resolve(room)
        coordinator = self._directory.resolve(coordinator_room)
        await self._gateway.send(handle, Join(coordinator.uid))

    async def leave(self, room: str) -> None:
        await self._send(room, Leave())

    async def _send(self, room: str, command: Command) -> None:
        handle = self._directory.resolve(room)
        logger.debug("grouping_command", room=handle.room_name, command=command.describe())
        await self._gateway.send(handle, command)
