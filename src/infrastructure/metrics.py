# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prometheus metrics for the content network.

Metrics are registered on the default registry and exposed by the
``/metrics`` route:

- fateh_content_versions_total: Versions recorded by change type
- fateh_distribution_jobs_total: Finished distribution jobs by final status
- fateh_node_sync_total: Per-node mirror syncs by result
- fateh_node_sync_duration_seconds: Per-node mirror sync duration
- fateh_localizations_total: Localization passes by localization type
- fateh_translation_transitions_total: Translation requests entering a status
- fateh_translation_reviews_overdue: Requests waiting in review past the alert threshold
- fateh_access_checks_total: Access checks by requested tier and outcome
"""

from prometheus_client import Counter, Gauge, Histogram

NAMESPACE = "fateh"

CONTENT_VERSIONS = Counter(
    f"{NAMESPACE}_content_versions_total",
    "Content versions recorded",
    ["change_type"],
)

DISTRIBUTION_JOBS = Counter(
    f"{NAMESPACE}_distribution_jobs_total",
    "Distribution jobs finished",
    ["status"],
)

NODE_SYNCS = Counter(
    f"{NAMESPACE}_node_sync_total",
    "Per-node mirror syncs",
    ["result"],
)

NODE_SYNC_DURATION = Histogram(
    f"{NAMESPACE}_node_sync_duration_seconds",
    "Per-node mirror sync duration",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
)

LOCALIZATIONS = Counter(
    f"{NAMESPACE}_localizations_total",
    "Localization passes applied",
    ["localization_type"],
)

TRANSLATION_TRANSITIONS = Counter(
    f"{NAMESPACE}_translation_transitions_total",
    "Translation requests entering a status",
    ["status"],
)

OVERDUE_TRANSLATION_REVIEWS = Gauge(
    f"{NAMESPACE}_translation_reviews_overdue",
    "Translation requests waiting in review longer than the alert threshold",
)

ACCESS_CHECKS = Counter(
    f"{NAMESPACE}_access_checks_total",
    "Access checks",
    ["tier", "granted"],
)
