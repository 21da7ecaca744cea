"""Fateh Content Network.

Global content catalog with semantic versioning, fan-out to regional
nodes, per-node localization and subscription-based access.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
