"""
Visitation ledger used by the builder to break reference cycles.

The ledger is an arena of node slots plus one entry per custom type seen during
a single build. An entry is registered before the builder recurses into the
type's fields, with its slot holding a ReferenceNode placeholder. Once the
object node is assembled, the slot is overwritten with it. A field that reaches
the same type while the placeholder is still in place has found a cycle.

Ledgers are scoped to one top-level build and must not be shared between
concurrent builds.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from schema_forge.schema.types import ReferenceNode, SchemaNode

logger = logging.getLogger(__name__)


@dataclass
class LedgerEntry:
    """
    Bookkeeping for one visited type.

    Attributes:
        slot: Index of this type's node in the ledger arena
        ref_id: Stable reference identifier of the type
        recursion_detected: Whether the type was reached again while its
            placeholder was still in the arena
    """

    slot: int
    ref_id: str
    recursion_detected: bool = False


class VisitationLedger:
    """
    Arena of schema nodes keyed by source type.

    Example:
        ```python
        ledger = VisitationLedger()
        entry = ledger.register(Person, "1b4e28ba-...")
        ledger.node(entry)        # ReferenceNode(ref_id="1b4e28ba-...")
        ledger.store(entry, person_object_node)
        ledger.node(entry)        # person_object_node
        ```
    """

    def __init__(self) -> None:
        self._arena: List[SchemaNode] = []
        self._entries: Dict[type, LedgerEntry] = {}

    def __contains__(self, tp: object) -> bool:
        return tp in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self._entries.values())

    def get(self, tp: type) -> Optional[LedgerEntry]:
        return self._entries.get(tp)

    def register(self, tp: type, ref_id: str) -> LedgerEntry:
        """
        Register a type on first visit, with a reference placeholder in its slot.

        Args:
            tp: Type being visited
            ref_id: Stable reference identifier for the type

        Returns:
            LedgerEntry: The new entry
        """
        self._arena.append(ReferenceNode(ref_id=ref_id))
        entry = LedgerEntry(slot=len(self._arena) - 1, ref_id=ref_id)
        self._entries[tp] = entry
        logger.debug(f"Ledger registered {getattr(tp, '__qualname__', tp)} as {ref_id} (slot {entry.slot})")
        return entry

    def node(self, entry: LedgerEntry) -> SchemaNode:
        """Current node held in the entry's arena slot."""
        return self._arena[entry.slot]

    def store(self, entry: LedgerEntry, node: SchemaNode) -> None:
        """Overwrite the entry's arena slot with a finished node."""
        self._arena[entry.slot] = node

    def recursive_entries(self) -> List[LedgerEntry]:
        """Entries flagged as recursive, in registration order."""
        return [entry for entry in self._entries.values() if entry.recursion_detected]
