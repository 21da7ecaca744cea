# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the content network.

This package contains domain services that encapsulate business logic.
Each service works on an AsyncSession passed in by the caller, except the
distribution coordinator which opens its own sessions per node.

Domains:
    content: Global catalog, versions and payload validation.
    network: Regional node registry.
    distribution: Fan-out of content versions to node mirrors.
    localization: Node customization and the translation workflow.
    access: Node subscriptions and tier-based access decisions.
"""
