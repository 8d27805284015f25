"""Two-generation record of build output.

The ledger knows nothing about the filesystem. It compares the asset names a
build tool reports for the current build with the names it reported for the
last successful build; anything that disappeared is stale.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from build_janitor.errors import LedgerError

logger = logging.getLogger(__name__)

LEDGER_FORMAT_VERSION = 1


def snapshot(assets: Iterable[str]) -> tuple[str, ...]:
    """Turn an asset listing into a sorted, duplicate-free snapshot."""
    return tuple(sorted(set(assets)))


@dataclass
class AssetLedger:
    """Holds the previous and current asset snapshots.

    Attributes:
        previous: Snapshot of the build before the most recent one
        current: Snapshot of the most recent successful build
        builds_recorded: Number of builds committed to this ledger
    """

    previous: tuple[str, ...] = ()
    current: tuple[str, ...] = ()
    builds_recorded: int = 0
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def stale_against(self, assets: Iterable[str]) -> list[str]:
        """Return assets of the last build that are missing from ``assets``.

        Does not modify the ledger.
        """
        incoming = set(assets)
        return [asset for asset in self.current if asset not in incoming]

    def commit(self, assets: Iterable[str]) -> None:
        """Make ``assets`` the current snapshot."""
        self.previous = self.current
        self.current = snapshot(assets)
        self.builds_recorded += 1
        self.updated_at = datetime.now()

    def record_build(self, assets: Iterable[str]) -> list[str]:
        """Diff ``assets`` against the last build, then commit them.

        The first build always yields an empty list.

        Args:
            assets: Relative output paths reported by the build tool

        Returns:
            Sorted list of stale asset paths
        """
        assets = list(assets)
        stale = self.stale_against(assets)
        self.commit(assets)
        if stale:
            logger.debug(f"Ledger found {len(stale)} stale asset(s)")
        return stale

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": LEDGER_FORMAT_VERSION,
            "assets": list(self.current),
            "builds_recorded": self.builds_recorded,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AssetLedger":
        """Create from dictionary.

        Raises:
            LedgerError: If the data is not a ledger this version understands
        """
        if not isinstance(data, dict) or data.get("version") != LEDGER_FORMAT_VERSION:
            raise LedgerError(f"Unsupported ledger format: {data!r:.80}")
        assets = data.get("assets", [])
        if not isinstance(assets, list) or not all(isinstance(a, str) for a in assets):
            raise LedgerError("Ledger 'assets' must be a list of strings")
        updated_at = data.get("updated_at")
        return cls(
            current=snapshot(assets),
            builds_recorded=int(data.get("builds_recorded", 0)),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    def save(self, path: str | Path) -> None:
        """Persist the current snapshot to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        logger.debug(f"Saved asset ledger: {path}")

    @classmethod
    def load(cls, path: str | Path) -> "AssetLedger":
        """Load a ledger saved with ``save``; a missing file gives an empty ledger.

        Raises:
            LedgerError: If the file exists but cannot be parsed
        """
        path = Path(path)
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise LedgerError(f"Failed to load asset ledger {path}: {e}") from e
        return cls.from_dict(data)
