# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Synchronize .resx string resources with translation services."""

__version__ = "0.1.0"
