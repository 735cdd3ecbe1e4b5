#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Culture identifiers and culture-qualified resource file names."""

import gettext
import re
from dataclasses import dataclass

from babel.core import Locale, UnknownLocaleError

from l10n_resxporter.errors import InvalidCultureError, ResourceFileError

_ = gettext.gettext

RESX_EXTENSION = ".resx"

RESX_FILE_PATTERN = re.compile(
    r"^(?P<base_name>.+?)(?:\.(?P<culture>[a-z]{2}(-[A-Z]{2,4})?))?\.resx$",
    re.IGNORECASE)


@dataclass(frozen=True, order=True)
class Culture:
    """A locale tag, or the default culture when ``name`` is empty."""
    name: str = ""

    @property
    def is_default(self):
        return not self.name

    def __str__(self):
        return self.name or "default"

    @classmethod
    def parse(cls, tag):
        """Return the culture for ``tag`` or raise InvalidCultureError."""
        try:
            locale = Locale.parse(tag.strip().replace("_", "-"), sep="-",
                                  resolve_likely_subtags=False)
        except (ValueError, UnknownLocaleError) as e:
            raise InvalidCultureError(
                _("Unknown culture '{}'.").format(tag)) from e
        parts = [locale.language]
        if locale.script:
            parts.append(locale.script)
        if locale.territory:
            parts.append(locale.territory)
        return cls("-".join(parts))

    @classmethod
    def try_parse(cls, tag):
        try:
            return cls.parse(tag)
        except InvalidCultureError:
            return None


DEFAULT_CULTURE = Culture()


@dataclass(frozen=True)
class ResourceFileName:
    """The family and culture encoded in a resource file name."""
    base_name: str
    culture: Culture = DEFAULT_CULTURE


def parse_resource_file_name(file_name, strict=False):
    """Split a file name like ``Strings.pt-BR.resx`` into base name and culture.

    In discovery mode (the default) names that are not resource files, or
    whose culture suffix is not a known locale, give None. With ``strict`` the
    name is expected to be valid and both cases raise.
    """
    match = RESX_FILE_PATTERN.match(file_name)
    if not match:
        if strict:
            raise ResourceFileError(
                _("Invalid resource file name '{}'.").format(file_name))
        return None

    base_name = match.group("base_name")
    tag = match.group("culture")
    if tag is None:
        return ResourceFileName(base_name)

    if strict:
        return ResourceFileName(base_name, Culture.parse(tag))
    culture = Culture.try_parse(tag)
    if culture is None:
        return None
    return ResourceFileName(base_name, culture)


def resource_file_name(base_name, culture=DEFAULT_CULTURE):
    """Inverse of parse_resource_file_name."""
    if culture.is_default:
        return base_name + RESX_EXTENSION
    return "{}.{}{}".format(base_name, culture.name, RESX_EXTENSION)
