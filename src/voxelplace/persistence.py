"""
Numbered JSON save slots.

Slot ``n`` lives at ``<save_dir>/<prefix><NN><ext>``. Failures are logged and
reported through the return value; nothing here raises on I/O problems.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from voxelplace.core.config import WorldConfig
from voxelplace.snapshot import WorldSnapshot
from voxelplace.utils.display import LiveLogger


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class SaveSlotStore:
    def __init__(self, config: Optional[WorldConfig] = None, logger: Optional[LiveLogger] = None):
        self.config = config or WorldConfig()
        self.save_dir = Path(self.config.save_dir)
        self.logger = logger or LiveLogger(verbose=False)

    def slot_path(self, slot: int) -> Path:
        slot = max(1, int(slot))
        return self.save_dir / f"{self.config.save_prefix}{slot:02d}{self.config.save_extension}"

    def exists(self, slot: int) -> bool:
        return self.slot_path(slot).exists()

    def save(self, slot: int, snapshot: WorldSnapshot) -> Optional[Path]:
        """
        Write a snapshot to a slot, stamping it with the local time.

        Returns:
            The written path, or None if the write failed
        """
        path = self.slot_path(slot)
        snapshot.saved_at = datetime.now().strftime(TIMESTAMP_FORMAT)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(snapshot.to_dict(), f, indent=2)
        except OSError as e:
            self.logger.log_error(f"Save failed for slot {slot}: {e}")
            return None

        self.logger.log_result(f"Saved {len(snapshot.placements)} shape(s) to {path}")
        return path

    def load(self, slot: int) -> Optional[WorldSnapshot]:
        """Read a slot; None when it is missing or unreadable."""
        path = self.slot_path(slot)
        if not path.exists():
            self.logger.log_warning(f"No save found for slot {slot} at {path}")
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return WorldSnapshot.from_dict(data)
        except (OSError, ValueError) as e:
            self.logger.log_error(f"Load failed for slot {slot}: {e}")
            return None

    def delete(self, slot: int) -> bool:
        path = self.slot_path(slot)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            self.logger.log_error(f"Delete failed for slot {slot}: {e}")
            return False
        return True

    def timestamp(self, slot: int) -> Optional[str]:
        """``saved_at`` of a slot without restoring it."""
        snapshot = self.load(slot) if self.exists(slot) else None
        if snapshot is None:
            return None
        return snapshot.saved_at
