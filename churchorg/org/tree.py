"""
Organization forest assembled from flat, parent-referencing org unit rows.

The forest is an arena: units are indexed by id and each parent keeps an ordered
list of child ids. A unit whose parent id is missing or unknown is a root.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from churchorg.models import OrgUnit

logger = logging.getLogger(__name__)


@dataclass
class OrgForest:
    units: Dict[str, OrgUnit] = field(default_factory=dict)
    child_ids: Dict[str, List[str]] = field(default_factory=dict)
    root_ids: List[str] = field(default_factory=list)

    def roots(self) -> List[OrgUnit]:
        return [self.units[unit_id] for unit_id in self.root_ids]

    def children(self, unit_id: str) -> List[OrgUnit]:
        return [self.units[child_id] for child_id in self.child_ids.get(unit_id, [])]

    def walk(self) -> Iterator[Tuple[OrgUnit, int]]:
        """
        Depth-first pre-order traversal yielding (unit, depth). Earlier siblings
        and their whole subtrees come before later siblings.
        """
        stack = [(unit_id, 0) for unit_id in reversed(self.root_ids)]
        while stack:
            unit_id, depth = stack.pop()
            yield self.units[unit_id], depth
            for child_id in reversed(self.child_ids.get(unit_id, [])):
                stack.append((child_id, depth + 1))

    def flatten(self) -> List[OrgUnit]:
        return [unit for unit, _ in self.walk()]

    def find(self, unit_id: str) -> Optional[OrgUnit]:
        for unit, _ in self.walk():
            if unit.entity_id == unit_id:
                return unit
        return None

    def descendant_ids(self, unit_id: str) -> List[str]:
        """Ids below `unit_id`, depth-first; empty for leaves and unknown ids."""
        found = []
        seen = {unit_id}
        stack = list(reversed(self.child_ids.get(unit_id, [])))
        while stack:
            child_id = stack.pop()
            if child_id in seen:
                continue
            seen.add(child_id)
            found.append(child_id)
            stack.extend(reversed(self.child_ids.get(child_id, [])))
        return found

    def __contains__(self, unit_id) -> bool:
        return self.find(unit_id) is not None

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def __bool__(self) -> bool:
        return bool(self.root_ids)


def _sort_key(unit: OrgUnit):
    # nulls last, like the store's ascending order
    return (unit.sort_order is None, unit.sort_order or 0)


def build_forest(units: Iterable[OrgUnit]) -> OrgForest:
    """
    Builds the forest in two passes over the rows.

    Siblings keep the input order; rows are re-sorted by sort order with a stable
    sort, so ties keep their arrival order. Units whose parent chain loops never
    reach a root and are left out of every traversal.
    """
    forest = OrgForest()
    ordered = sorted(units, key=_sort_key)

    for unit in ordered:
        forest.units[unit.entity_id] = unit
        forest.child_ids[unit.entity_id] = []

    for unit in ordered:
        parent_id = unit.parent_id
        if parent_id is not None and parent_id in forest.units:
            forest.child_ids[parent_id].append(unit.entity_id)
        else:
            if parent_id is not None:
                logger.warning("Unit %s references unknown parent %s; shown as a root.", unit.entity_id, parent_id)
            forest.root_ids.append(unit.entity_id)

    return forest


def find_unit(forest: Optional[OrgForest], unit_id: str) -> Optional[OrgUnit]:
    """Depth-first lookup; None when the forest is not loaded or the id is absent."""
    if forest is None or not unit_id:
        return None
    return forest.find(unit_id)
