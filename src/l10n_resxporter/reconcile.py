#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Write imported rows back into per-culture resource files."""

import gettext
import logging
from dataclasses import dataclass
from pathlib import Path

from l10n_resxporter.culture import (
    DEFAULT_CULTURE, RESX_EXTENSION, parse_resource_file_name, resource_file_name
)
from l10n_resxporter.errors import ResourceFileError
from l10n_resxporter.resource import KeyDict
from l10n_resxporter.resx import read_resx, update_resx, write_resx

_ = gettext.gettext

logger = logging.getLogger(__name__)


@dataclass
class FileChange:
    """Outcome of reconciling one resource file."""
    path: Path
    created: bool = False
    changes: int = 0

    @property
    def changed(self):
        return self.changes > 0


def pivot_rows(rows):
    """Turn rows into a mapping of (base name, culture) to entries.

    A later row replaces an earlier value for the same key.
    """
    lookup = {}
    for row in rows:
        for culture, value in row.values.items():
            lookup.setdefault((row.base_name, culture), KeyDict())[row.key] = value
    return lookup


def find_resource_files(directory):
    """Map (base name, culture) to every resource file below ``directory``."""
    files = {}
    for path in sorted(Path(directory).rglob("*")):
        if not path.is_file() or path.suffix.lower() != RESX_EXTENSION:
            continue
        parsed = parse_resource_file_name(path.name, strict=True)
        key = (parsed.base_name, parsed.culture)
        if key in files:
            logger.warning(_("Ignoring {}, already using {}").format(path, files[key]))
            continue
        files[key] = path
    return files


def load_existing_entries(path):
    """Entries of ``path``; empty when the file is new, empty or unreadable."""
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        return KeyDict()
    try:
        return read_resx(path)
    except ResourceFileError as e:
        logger.warning(_("Failed to load file '{}': {}").format(path, e))
        return KeyDict()


def merge_entries(existing, incoming, update_existing=False):
    """Combine existing and incoming entries.

    Existing entries keep their order and come first. New keys are appended;
    a key that already exists takes the incoming value only with
    ``update_existing``. Returns the merged entries and the number of changes.
    """
    merged = KeyDict(existing)
    changes = 0
    for key, value in incoming.items():
        if key in merged:
            if update_existing and merged[key] != value:
                merged[key] = value
                changes += 1
        else:
            merged[key] = value
            changes += 1
    return merged, changes


def changed_entries(existing, merged):
    """The entries of ``merged`` that are new or differ from ``existing``."""
    return KeyDict((key, value) for key, value in merged.items()
                   if key not in existing or existing[key] != value)


def _write_changes(path, existing, merged):
    updates = changed_entries(existing, merged)
    try:
        return update_resx(path, updates)
    except ResourceFileError:
        write_resx(path, merged)
        return len(updates)


def _create_empty(path):
    write_resx(path, {})
    logger.info(_("Created missing file: {}").format(path))


def reconcile(rows, directory, update_existing=False):
    """Apply ``rows`` to the resource files below ``directory``.

    Missing files are created in ``directory`` itself. Existing files are
    edited in place and only written when something changed; an
    unreadable file is regenerated from the incoming entries. Returns one
    FileChange per file considered.
    """
    directory = Path(directory)
    lookup = pivot_rows(rows)
    existing_files = find_resource_files(directory)
    created = set()

    for base_name in dict.fromkeys(base for base, _culture in lookup):
        key = (base_name, DEFAULT_CULTURE)
        if key not in existing_files:
            path = directory / resource_file_name(base_name)
            _create_empty(path)
            existing_files[key] = path
            created.add(path)

    results = []
    for (base_name, culture), translations in lookup.items():
        path = existing_files.get((base_name, culture))
        if path is None:
            if not translations:
                continue
            path = directory / resource_file_name(base_name, culture)
            _create_empty(path)
            existing_files[(base_name, culture)] = path
            created.add(path)

        existing = load_existing_entries(path)
        merged, changes = merge_entries(existing, translations, update_existing)
        if changes:
            changes = _write_changes(path, existing, merged)
        if changes:
            logger.info(_("Updated file: {} ({} changes)").format(path, changes))
        else:
            logger.debug("No changes for %s", path)
        results.append(FileChange(path, path in created, changes))

    return results
