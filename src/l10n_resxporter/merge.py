#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Collect resource files and merge them into one row per key."""

import gettext
import logging
from collections.abc import Mapping
from pathlib import Path

from l10n_resxporter.culture import (
    DEFAULT_CULTURE, RESX_EXTENSION, parse_resource_file_name
)
from l10n_resxporter.errors import ConfigurationError
from l10n_resxporter.resource import ResourceRow
from l10n_resxporter.resx import read_resx

_ = gettext.gettext

logger = logging.getLogger(__name__)


def check_base_names(directory, base_names):
    """Raise ConfigurationError unless every named family has a default file."""
    for name in base_names:
        path = Path(directory) / (name + RESX_EXTENSION)
        if not path.is_file():
            raise ConfigurationError(
                _("File '{}' does not exist in '{}'.").format(path, directory))


def collect_resource_files(directory, base_names=None):
    """Return the .resx files directly inside ``directory``, sorted by path.

    When ``base_names`` is given only members of those families, matched
    case-insensitively, are returned.
    """
    files = sorted(path for path in Path(directory).iterdir()
                   if path.is_file() and path.suffix.lower() == RESX_EXTENSION)
    if not base_names:
        return files

    wanted = {name.casefold() for name in base_names}
    selected = []
    for path in files:
        parsed = parse_resource_file_name(path.name)
        if parsed is not None and parsed.base_name.casefold() in wanted:
            selected.append(path)
    return selected


def load_resource_files(files):
    """Read ``files`` into a mapping of (base file, culture) to entries.

    Files with an unknown culture suffix are skipped. The mapping is ordered
    by base file, with the default culture first in each family.
    """
    sources = {}
    for path in files:
        path = Path(path)
        parsed = parse_resource_file_name(path.name)
        if parsed is None:
            logger.debug("Skipping %s: not a culture-qualified resource file", path)
            continue
        base_file = path.with_name(parsed.base_name + RESX_EXTENSION)
        entries = read_resx(path)
        sources[(base_file, parsed.culture)] = entries
        logger.debug("Loaded %d entries from %s", len(entries), path)
    return dict(sorted(sources.items(), key=lambda item: (str(item[0][0]), item[0][1])))


def observed_cultures(sources):
    """The distinct non-default cultures of ``sources``, sorted by tag."""
    return sorted({culture for _base_file, culture in sources
                   if culture is not None and not culture.is_default})


def merge_resources(sources, copy_translations=False):
    """Merge per-culture entries into one ResourceRow per (base name, key).

    ``sources`` maps (base file, culture) to a key/value mapping, or is an
    iterable of such pairs. A culture of None stands for the default culture.
    Rows are grouped by the base file's name, not its full path, and keys
    are compared case-insensitively.

    With ``copy_translations`` a row lacking a culture takes it from another
    row whose default text is exactly the same. Existing values are never
    overwritten and the first row found supplies a missing culture.
    """
    if isinstance(sources, Mapping):
        sources = sources.items()

    rows = {}
    same_text = {}
    for (base_file, culture), entries in sources:
        base_file = Path(base_file)
        base_name = base_file.stem
        if culture is None:
            culture = DEFAULT_CULTURE

        for key, value in entries.items():
            row_key = (base_name, key.casefold())
            row = rows.get(row_key)
            if row is None:
                row = rows[row_key] = ResourceRow(base_file, base_name, key)
            if culture in row.values:
                logger.warning(
                    _("Duplicate {} value for '{}' in {}, keeping the first")
                    .format(culture, key, base_name))
                continue
            row.values[culture] = value
            if culture.is_default:
                same_text.setdefault(value, []).append(row)

    if copy_translations:
        copied = _copy_translations(rows.values(), same_text)
        logger.info(_("Copied {} translations from identical texts").format(copied))

    return list(rows.values())


def _copy_translations(rows, same_text):
    copied = 0
    for row in rows:
        text = row.values.get(DEFAULT_CULTURE)
        if text is None:
            continue
        for sibling in same_text.get(text, ()):
            if sibling is row:
                continue
            for culture, value in sibling.values.items():
                if culture.is_default or culture in row.values:
                    continue
                row.values[culture] = value
                copied += 1
    return copied


def select_missing(rows, cultures):
    """Keep the rows lacking a value for at least one of ``cultures``."""
    return [row for row in rows
            if any(culture not in row.values for culture in cultures)]
