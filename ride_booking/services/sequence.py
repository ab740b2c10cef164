"""
Monotonic id sequences for rides and complaints.

Ids are ``<prefix><n>``. The counter is owned by the system aggregate and
is recomputed from existing ids when a snapshot is loaded.
"""

import logging
import re
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

class IdSequence:
    def __init__(self, prefix: str, next_value: int = 1):
        if not prefix or prefix[-1].isdigit():
            raise ValueError("Id prefix must be non-empty and must not end with a digit")
        self.prefix = prefix
        self.next_value = next_value
        self._pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    def next_id(self) -> str:
        value = self.next_value
        self.next_value += 1
        return f"{self.prefix}{value}"

    def peek(self) -> str:
        return f"{self.prefix}{self.next_value}"

    def suffix_of(self, identifier: str) -> Optional[int]:
        match = self._pattern.match(identifier)
        return int(match.group(1)) if match else None

    def recover(self, existing_ids: Iterable[str]) -> int:
        """Move the counter past every id in ``existing_ids``.

        The counter never moves backwards. Returns the new next value.
        """
        highest = 0
        for identifier in existing_ids:
            suffix = self.suffix_of(identifier)
            if suffix is None:
                logger.warning(f"Ignoring id {identifier!r} without prefix {self.prefix!r}")
                continue
            highest = max(highest, suffix)
        self.next_value = max(self.next_value, highest + 1)
        return self.next_value

    def __repr__(self):
        return f"<IdSequence(prefix={self.prefix!r}, next_value={self.next_value})>"
