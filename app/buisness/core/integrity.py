"""
Integrity Engine

Decides, for a pending mutation, whether the resulting state would break a
structural invariant of the location tree, asset placement or project
assignment. Uses read access only; never mutates.

Each check is an independent predicate so every failure reason can be
reported (and tested) on its own. The entity service runs the checks and the
mutation inside one transaction.
"""

from dataclasses import dataclass
from typing import Optional

from app.buisness.core.deadline import Deadline
from app.buisness.core.errors import IntegrityViolation, ViolationReason
from app.data.core.asset import Asset
from app.data.core.consumable import Consumable
from app.data.core.location import Location
from app.utils.logger import get_logger

logger = get_logger("inventory.buisness.integrity")


@dataclass(frozen=True)
class Decision:
    """Allow / Deny(reason) result of an integrity check"""

    allowed: bool
    reason: Optional[ViolationReason] = None
    detail: Optional[str] = None

    @classmethod
    def allow(cls) -> 'Decision':
        return cls(True)

    @classmethod
    def deny(cls, reason: ViolationReason, detail: Optional[str] = None) -> 'Decision':
        return cls(False, ViolationReason(reason), detail)

    def __bool__(self):
        return self.allowed

    def enforce(self) -> None:
        """Raise IntegrityViolation if this decision is a denial"""
        if not self.allowed:
            raise IntegrityViolation(self.reason, detail=self.detail)


class IntegrityEngine:
    """
    Read-only invariant checks over the persistence gateway.

    Every method takes an optional Deadline which is checked before each
    round trip.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    def can_delete_location(self, location_id: str, deadline: Optional[Deadline] = None) -> Decision:
        """
        A location can be deleted only when it is empty.

        Checked in order: child locations, assets, consumables; the first
        one found is the reason reported.
        """
        deadline = deadline or Deadline.unbounded()

        deadline.check("child location check")
        if self.gateway.exists(Location, parent_location_id=location_id):
            logger.info(f"[can_delete_location] Location {location_id} has child locations")
            return Decision.deny(ViolationReason.HAS_CHILD_LOCATIONS, location_id)

        deadline.check("contained asset check")
        if self.gateway.exists(Asset, location_id=location_id):
            logger.info(f"[can_delete_location] Location {location_id} contains assets")
            return Decision.deny(ViolationReason.CONTAINS_ASSETS, location_id)

        deadline.check("contained consumable check")
        if self.gateway.exists(Consumable, location_id=location_id):
            logger.info(f"[can_delete_location] Location {location_id} contains consumables")
            return Decision.deny(ViolationReason.CONTAINS_CONSUMABLES, location_id)

        return Decision.allow()

    def can_delete_project(self, project_id: str, deadline: Optional[Deadline] = None) -> Decision:
        deadline = deadline or Deadline.unbounded()

        deadline.check("assigned asset check")
        if self.gateway.exists(Asset, project_id=project_id):
            logger.info(f"[can_delete_project] Project {project_id} has assigned assets")
            return Decision.deny(ViolationReason.HAS_ASSIGNED_ASSETS, project_id)

        return Decision.allow()

    def can_attach_parent(self, child_id: Optional[str], candidate_parent_id: str,
                          deadline: Optional[Deadline] = None) -> Decision:
        """
        Can candidate_parent_id become the parent of child_id?

        Args:
            child_id: The location being reparented, or None for a location
                that does not exist yet (creation cannot form a cycle)
            candidate_parent_id: Proposed parent location id

        Returns:
            Deny(ParentNotFound) if the parent does not exist,
            Deny(ParentCycle) if the parent is the child itself or one of its
            descendants, Allow otherwise
        """
        deadline = deadline or Deadline.unbounded()

        deadline.check("parent lookup")
        parent = self.gateway.find_by_id(Location, candidate_parent_id)
        if parent is None:
            logger.info(f"[can_attach_parent] Parent location {candidate_parent_id} not found")
            return Decision.deny(ViolationReason.PARENT_NOT_FOUND, candidate_parent_id)

        if child_id is None:
            return Decision.allow()

        # Walk up from the candidate; reaching the child means the child is an ancestor
        seen = set()
        node = parent
        while node is not None:
            if node.id == child_id:
                logger.info(
                    f"[can_attach_parent] Location {candidate_parent_id} is {child_id} or one of its descendants"
                )
                return Decision.deny(ViolationReason.PARENT_CYCLE, candidate_parent_id)
            if node.id in seen or node.parent_location_id is None:
                break
            seen.add(node.id)
            deadline.check("ancestor walk")
            node = self.gateway.find_by_id(Location, node.parent_location_id)

        return Decision.allow()

    def can_delete_asset(self, asset_id: str, deadline: Optional[Deadline] = None) -> Decision:
        """
        Always allows: assets are leaves and only their own history references
        them. Kept so every delete goes through the engine.
        """
        return Decision.allow()
