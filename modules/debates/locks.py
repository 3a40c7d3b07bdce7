"""Per-debate locks that serialize turn taking."""

import asyncio
import weakref


class DebateLockRegistry:
    """
    Hands out one asyncio.Lock per debate ID.

    Locks are held weakly, so a debate's lock disappears once no request
    holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def get(self, debate_id: str) -> asyncio.Lock:
        lock = self._locks.get(debate_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[debate_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
