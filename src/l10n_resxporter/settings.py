#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Default provider options from the user's settings file.

The file is JSON with one section per provider kind::

    {"exporters": {"MicrosoftLists": {"clientId": "...", "tenantId": "..."}},
     "loaders": {"JetBrainsCsv": {"input": "translations.csv"}}}
"""

import gettext
import json
import os

from l10n_resxporter.errors import ConfigurationError
from l10n_resxporter.resource import KeyDict

_ = gettext.gettext

APP_NAME = "l10n-resxporter"


def settings_path():
    xdg = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return os.path.join(xdg, APP_NAME, "settings.json")


def load_settings(path=None):
    """Read the settings file; a missing default file is an empty one."""
    explicit = path is not None
    path = path or settings_path()
    if not os.path.exists(path):
        if explicit:
            raise ConfigurationError(_("Settings file not found: {}").format(path))
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            settings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(_("Invalid settings file {}: {}").format(path, e)) from e
    if not isinstance(settings, dict):
        raise ConfigurationError(_("Invalid settings file {}: expected an object").format(path))
    return settings


def provider_options(settings, section, identifier):
    """The options stored for one provider, as a case-insensitive map."""
    options = KeyDict()
    providers = settings.get(section) or {}
    for name, values in providers.items():
        if name.casefold() == identifier.casefold() and isinstance(values, dict):
            for key, value in values.items():
                options[key] = value if isinstance(value, str) else json.dumps(value)
    return options
