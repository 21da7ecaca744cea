# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Advisory locks for node mirror rows.

Distribution and localization both write LocalContent rows. Holding the
(node, content) lock around those writes keeps a localization pass from
interleaving with a re-sync of the same row in this process.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class MirrorLockRegistry:
    """In-process asyncio locks keyed by (node_id, content_id).

    Entries are dropped once no task holds or waits for them.
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._users: dict[tuple[str, str], int] = {}

    @asynccontextmanager
    async def hold(self, node_id: str, content_id: str) -> AsyncIterator[None]:
        key = (node_id, content_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def is_locked(self, node_id: str, content_id: str) -> bool:
        lock = self._locks.get((node_id, content_id))
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)


mirror_locks = MirrorLockRegistry()
