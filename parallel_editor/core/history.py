"""
Undo history for destructive edits.

HistoryStack keeps the counted revert policy of the editor in one place:

* record() pushes a snapshot and bumps pending_revert_count.
* revert() pops pending_revert_count snapshots (not a caller-chosen number),
  re-records the last one popped so the revert itself can be reverted, and
  then resets pending_revert_count to the remaining depth.
"""

from typing import List, Optional

from ..utils.logging import get_logger
from .errors import HistoryUnderflowError, NullImageError
from .types import PixelBuffer

logger = get_logger(__name__)


class HistoryStack:
    """LIFO store of PixelBuffer snapshots with a revert counter."""

    def __init__(self):
        self._states: List[PixelBuffer] = []
        self.pending_revert_count: int = 0

    # ========== Recording ==========

    def record(self, buffer: PixelBuffer) -> None:
        """Push a copy of ``buffer`` taken after a confirmed edit."""
        if buffer is None:
            raise NullImageError("Cannot record an empty image state")
        self._states.append(buffer.clone())
        self.pending_revert_count += 1
        logger.debug(
            "Recorded state %dx%d (depth=%d, pending=%d)",
            buffer.width, buffer.height, self.depth, self.pending_revert_count,
        )

    # ========== Reverting ==========

    def can_revert(self) -> bool:
        """True when revert() would restore a state rather than no-op."""
        return 0 < self.pending_revert_count <= self.depth

    def revert(self, steps: Optional[int] = None, strict: bool = False) -> Optional[PixelBuffer]:
        """
        Restore an earlier state.

        The number of snapshots popped is pending_revert_count; ``steps`` is
        accepted for API symmetry and ignored. Returns the restored state, a
        copy of which is pushed back on top of the stack. When the stack is too
        shallow this is a no-op returning None, or raises
        HistoryUnderflowError if ``strict`` is set.
        """
        count = self.pending_revert_count
        if not self.can_revert():
            if strict:
                raise HistoryUnderflowError(self.depth, count)
            logger.debug("Revert ignored: depth=%d, pending=%d", self.depth, count)
            return None

        if steps is not None and steps != count:
            logger.debug("Revert uses pending count %d, not requested %d", count, steps)

        restored = None
        for _ in range(count):
            restored = self._states.pop()

        self.record(restored)
        self.pending_revert_count = self.depth
        logger.info("Reverted %d step(s); history depth now %d", count, self.depth)
        return restored

    # ========== Introspection ==========

    @property
    def depth(self) -> int:
        return len(self._states)

    def peek(self) -> Optional[PixelBuffer]:
        """Copy of the most recently recorded state, or None."""
        return self._states[-1].clone() if self._states else None

    def clear(self) -> None:
        self._states.clear()
        self.pending_revert_count = 0

    def __len__(self) -> int:
        return len(self._states)
