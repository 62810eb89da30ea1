"""
Serialization rename metadata.

Classes and enums whose identifiers had to be changed from their external
(JSON) names record the pairs here, so the backend can emit attribute blocks
that map them back at (de)serialization time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple


class SerializationDirection(Enum):
    """Direction a rename block applies to, in emission order."""

    DESERIALIZE = "deserialize"
    SERIALIZE = "serialize"


@dataclass(frozen=True)
class RenameEntry:
    identifier: str
    external_name: str


class RenameCollector:
    """Accumulates rename entries for one class or enum declaration."""

    def __init__(self, owner: str):
        self.owner = owner
        self._entries: List[RenameEntry] = []

    def record(self, identifier: str, external_name: str) -> bool:
        """
        Record a pair if the identifier differs from the external name.

        Returns:
            True if an entry was added
        """
        if identifier == external_name:
            return False
        self._entries.append(RenameEntry(identifier, external_name))
        return True

    @property
    def entries(self) -> List[RenameEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RenameEntry]:
        return iter(self._entries)

    def blocks(self) -> List[Tuple[SerializationDirection, List[RenameEntry]]]:
        """
        One block per direction listing every entry, or nothing at all.

        Both blocks carry the same entries so the two directions stay
        symmetric.
        """
        if not self._entries:
            return []
        return [(direction, self.entries) for direction in SerializationDirection]
