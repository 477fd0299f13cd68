"""Time-slotted job queue driving the per-voice synthesizer handlers."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Mapping, Optional

NUM_SLOTS = 32
_SLOT_MASK = NUM_SLOTS - 1
_SLOT_TIME = 256


class JobType(IntEnum):
    """Kinds of voice jobs."""

    LOW = 0
    ZERO = 1
    EVENT = 2


_HANDLING_ORDER = (JobType.LOW, JobType.EVENT, JobType.ZERO)


class JobQueue:
    """A ring of 32 time slots, each with a queue per job type.

    Jobs are keyed by voice index.  Each voice has at most one job of each
    type pending; a low-precision or zero-offset job added again moves to
    its new slot, while a pending event job stays where it is.  Newer jobs
    run first within a slot.
    """

    def __init__(self) -> None:
        self.index = 0
        self._slots: list[dict[JobType, list[int]]] = [
            {t: [] for t in JobType} for _ in range(NUM_SLOTS)
        ]
        self._queued: dict[tuple[JobType, int], int] = {}

    def add(self, voice: int, job_type: JobType, delta_time: int) -> None:
        """Queue a job ``delta_time`` (1/256 ms) ahead of the current slot."""
        job_type = JobType(job_type)
        slot = ((delta_time >> 8) + self.index) & _SLOT_MASK
        key = (job_type, voice)
        old = self._queued.get(key)
        if old is not None:
            if job_type == JobType.EVENT or old == slot:
                return
            queue = self._slots[old][job_type]
            if voice in queue:
                queue.remove(voice)
        self._slots[slot][job_type].insert(0, voice)
        self._queued[key] = slot

    def pending(self, job_type: JobType) -> list[int]:
        """Voices with a job of this type in the current slot, in running order."""
        return list(self._slots[self.index][JobType(job_type)])

    def handle(self, handlers: Mapping[JobType, Callable[[int], None]],
               is_blocked: Optional[Callable[[int], bool]] = None) -> None:
        """Run the current slot's jobs and move on to the next slot.

        Low-precision jobs run first, then events, then zero-offset jobs.
        Jobs of blocked voices are dropped without running.
        """
        slot_index = self.index
        slot = self._slots[slot_index]
        for job_type in _HANDLING_ORDER:
            queue = slot[job_type]
            slot[job_type] = []
            handler = handlers.get(job_type)
            for voice in queue:
                key = (job_type, voice)
                if self._queued.get(key) != slot_index:
                    continue
                del self._queued[key]
                if is_blocked is not None and is_blocked(voice):
                    continue
                if handler is not None:
                    handler(voice)
        self.index = (slot_index + 1) & _SLOT_MASK