#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Resource data model."""

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from pathlib import Path


class KeyDict(MutableMapping):
    """A mapping with case-insensitive string keys.

    Insertion order is kept. The first spelling of a key wins; assigning
    through another spelling only replaces the value.
    """

    def __init__(self, data=None):
        self._store = {}
        if data:
            self.update(data)

    def __getitem__(self, key):
        return self._store[key.casefold()][1]

    def __setitem__(self, key, value):
        folded = key.casefold()
        entry = self._store.get(folded)
        self._store[folded] = (entry[0] if entry else key, value)

    def __delitem__(self, key):
        del self._store[key.casefold()]

    def __iter__(self):
        return (original for original, _value in self._store.values())

    def __len__(self):
        return len(self._store)

    def __repr__(self):
        return "{}({!r})".format(type(self).__name__, dict(self.items()))


@dataclass
class ResourceRow:
    """One resource key of a file family with its value in every culture."""
    base_file: Path
    base_name: str
    key: str
    values: dict = field(default_factory=dict)


@dataclass
class ExportSettings:
    """What an exporter needs to know about the rows it is given."""
    only_missing: bool = False
    cultures: list = field(default_factory=list)
