"""
import_engine.center_matcher - Resolve free-text PHC names to known centers.

Matching is a deterministic fold, not similarity scoring: both sides are
lower-cased and stripped of everything outside a-z0-9, then compared
exactly.  "St. Mary's Clinic" and "st marys clinic" are the same center.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from import_engine.report import HealthcareCenterRef

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_center_name(name: str) -> str:
    return _NON_ALNUM_RE.sub("", str(name).lower())


class CenterIndex:
    """
    Normalised-name lookup over a snapshot of the center store.

    Built once per import run.  When two centers normalise to the same
    key the one loaded last wins; the clash is logged and kept in
    ``collisions`` (key → names that were shadowed).
    """

    def __init__(self, centers: Iterable[HealthcareCenterRef]):
        self._by_key: dict[str, HealthcareCenterRef] = {}
        self.collisions: dict[str, list[str]] = {}

        for center in centers:
            key = normalize_center_name(center.name)
            if not key:
                continue
            previous = self._by_key.get(key)
            if previous is not None and previous.id != center.id:
                self.collisions.setdefault(key, []).append(previous.name)
                logger.warning(
                    "Center name %r collides with %r (key %r); using the later one",
                    center.name, previous.name, key,
                )
            self._by_key[key] = center

    def __len__(self) -> int:
        return len(self._by_key)

    def match(self, name: str) -> HealthcareCenterRef | None:
        key = normalize_center_name(name)
        if not key:
            return None
        return self._by_key.get(key)
