# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the content network.

- config: Application configuration and settings
- exceptions: Base error taxonomy shared by all domains
"""
