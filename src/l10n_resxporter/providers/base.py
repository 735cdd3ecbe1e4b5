#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Exporter and loader interfaces and option helpers shared by providers."""

import gettext
import os
from pathlib import Path

from l10n_resxporter.culture import RESX_EXTENSION
from l10n_resxporter.errors import ConfigurationError
from l10n_resxporter.resource import ResourceRow

_ = gettext.gettext


class Exporter:
    """Writes merged rows to an external system."""

    name = None

    def export(self, rows, settings):
        raise NotImplementedError


class Loader:
    """Reads rows back from an external system."""

    name = None

    def fetch(self):
        """Yield ResourceRow objects. Can only be iterated once."""
        raise NotImplementedError


def required_option(options, key):
    value = options.get(key)
    if value is None or value == "":
        raise ConfigurationError(
            _("The value for key '{}' is required.").format(key))
    return value


def boolean_option(options, key):
    return str(options.get(key, "")).strip().lower() == "true"


def integer_option(options, key, default):
    value = options.get(key)
    if value is None:
        return default
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        raise ConfigurationError(
            _("The value for key '{}' must be a positive integer.").format(key))
    return number


def relative_resource_path(base_file):
    """Path of ``base_file`` relative to the working directory.

    The extension is dropped and separators are always forward slashes.
    """
    relative = os.path.relpath(os.path.abspath(base_file), os.getcwd())
    return os.path.splitext(relative)[0].replace(os.sep, "/")


def row_for_path(path, key):
    """An empty row for ``key`` whose base file is ``<cwd>/<path>.resx``."""
    base_file = Path(os.getcwd()) / (path + RESX_EXTENSION)
    return ResourceRow(base_file, base_file.stem, key)
