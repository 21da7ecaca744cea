# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Result values of per-node sync operations and their fold into a job status."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.models.common import DistributionStatus
from src.utils.datetime import format_iso, utc_now


@dataclass(frozen=True)
class NodeSyncOutcome:
    """Outcome of syncing one node's mirror.

    Attributes:
        node_id: Target node.
        succeeded: Whether the mirror now holds the distributed version.
        created: True when the mirror row was created rather than updated.
        error: Failure message, set only when succeeded is False.
        timestamp: When the outcome was determined.
    """

    node_id: str
    succeeded: bool
    created: bool = False
    error: str | None = None
    timestamp: datetime = field(default_factory=utc_now)

    @classmethod
    def success(cls, node_id: str, created: bool) -> "NodeSyncOutcome":
        return cls(node_id=node_id, succeeded=True, created=created)

    @classmethod
    def failure(cls, node_id: str, error: str) -> "NodeSyncOutcome":
        return cls(node_id=node_id, succeeded=False, error=error)

    def as_failure_record(self) -> dict[str, Any]:
        """JSON entry stored in DistributionJob.failures."""
        return {
            "node_id": self.node_id,
            "error": self.error or "",
            "timestamp": format_iso(self.timestamp),
        }


@dataclass(frozen=True)
class DistributionSummary:
    """Fold of all node outcomes of one job."""

    status: DistributionStatus
    successful_nodes: int
    failed_nodes: int
    failures: list[dict[str, Any]]


def summarize_outcomes(outcomes: list[NodeSyncOutcome]) -> DistributionSummary:
    """Fold node outcomes into the final job status and counts.

    Zero failures gives ``completed``, anything else ``partial_failure``.
    """
    failures = [o.as_failure_record() for o in outcomes if not o.succeeded]
    successful = sum(1 for o in outcomes if o.succeeded)
    status = (
        DistributionStatus.COMPLETED if not failures else DistributionStatus.PARTIAL_FAILURE
    )
    return DistributionSummary(
        status=status,
        successful_nodes=successful,
        failed_nodes=len(failures),
        failures=failures,
    )
