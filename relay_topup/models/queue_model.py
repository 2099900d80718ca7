from dataclasses import dataclass, replace
from typing import Self


@dataclass(frozen=True, slots=True)
class QueueState:
    """
    Snapshot of the wallet queue.

    Every wallet line lives in exactly one of the three lists. ``record``
    moves one line out of ``remaining`` and never mutates the snapshot it
    was called on.
    """
    remaining: tuple[str, ...] = ()
    succeeded: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()

    @classmethod
    def from_lines(
        cls,
        remaining: list[str],
        succeeded: list[str] | None = None,
        failed: list[str] | None = None
    ) -> Self:
        return cls(tuple(remaining), tuple(succeeded or ()), tuple(failed or ()))

    def record(self, line: str, success: bool) -> Self:
        remaining = list(self.remaining)
        if line in remaining:
            remaining.remove(line)

        if success:
            return replace(self, remaining=tuple(remaining), succeeded=self.succeeded + (line,))
        return replace(self, remaining=tuple(remaining), failed=self.failed + (line,))

    @property
    def total(self) -> int:
        return len(self.remaining) + len(self.succeeded) + len(self.failed)
