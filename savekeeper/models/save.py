"""Save data model — one live save directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Save:
    """
    A live, in-use save directory.

    Built fresh on every scan and never mutated; callers hand copies of it
    back into the backup engine.
    """

    name: str  # Directory name — the save's identity
    path: Path
    parent: Path  # Category root that directly contains ``path``
    update_time: str  # Display form of ``modified``
    category: str = ""
    modified: float = 0.0
