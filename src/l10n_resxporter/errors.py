#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Exceptions raised by the resource tools."""


class ResxporterError(Exception):
    """Base class for all errors reported to the user."""


class ConfigurationError(ResxporterError, ValueError):
    """Invalid command line, option or settings file."""


class InvalidCultureError(ResxporterError, ValueError):
    """A culture tag that is not a known locale."""


class ResourceFileError(ResxporterError):
    """A resource file that cannot be read or named."""


class ProviderError(ResxporterError):
    """A transport failed to talk to its external system."""


class AuthenticationError(ProviderError):
    """The transport could not open a session."""
