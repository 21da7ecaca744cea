# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content distribution domain package.

This package provides fan-out of global content to node mirrors:
- DistributionCoordinator: job lifecycle and per-node upserts
- NodeSyncOutcome: result value of one node's sync
- MirrorLockRegistry: advisory (node, content) locks
"""

from src.domains.distribution.coordinator import (
    ContentNotDistributableError,
    ContentSnapshot,
    DistributionCoordinator,
    DistributionJobNotFoundError,
    InvalidDistributionTransitionError,
    NodeSuspendedError,
)
from src.domains.distribution.locks import MirrorLockRegistry, mirror_locks
from src.domains.distribution.outcomes import (
    DistributionSummary,
    NodeSyncOutcome,
    summarize_outcomes,
)

__all__ = [
    "DistributionCoordinator",
    "ContentSnapshot",
    "ContentNotDistributableError",
    "DistributionJobNotFoundError",
    "InvalidDistributionTransitionError",
    "NodeSuspendedError",
    "MirrorLockRegistry",
    "mirror_locks",
    "NodeSyncOutcome",
    "DistributionSummary",
    "summarize_outcomes",
]
