# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Transport plugins, looked up by identifier."""

import gettext

from l10n_resxporter.errors import ConfigurationError
from l10n_resxporter.providers.jetbrains_csv import JetBrainsCsvExporter, JetBrainsCsvLoader
from l10n_resxporter.providers.microsoft_lists import (
    MicrosoftListsExporter, MicrosoftListsLoader
)
from l10n_resxporter.resource import KeyDict

_ = gettext.gettext

EXPORTERS = {cls.name: cls for cls in (JetBrainsCsvExporter, MicrosoftListsExporter)}
LOADERS = {cls.name: cls for cls in (JetBrainsCsvLoader, MicrosoftListsLoader)}


def _lookup(registry, identifier, kind):
    for name, cls in registry.items():
        if name.casefold() == identifier.casefold():
            return cls
    raise ConfigurationError(_("Unknown {} '{}'. Available: {}").format(
        kind, identifier, ", ".join(registry)))


def create_exporter(identifier, options=None):
    """Instantiate the exporter named ``identifier`` with its option map."""
    return _lookup(EXPORTERS, identifier, _("exporter"))(KeyDict(options))


def create_loader(identifier, options=None):
    """Instantiate the loader named ``identifier`` with its option map."""
    return _lookup(LOADERS, identifier, _("loader"))(KeyDict(options))
