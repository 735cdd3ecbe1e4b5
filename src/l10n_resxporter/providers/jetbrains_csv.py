#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Semicolon separated CSV as used by the JetBrains resource editor."""

import csv
import gettext
import logging
import os
from pathlib import Path

from l10n_resxporter.culture import DEFAULT_CULTURE, Culture
from l10n_resxporter.errors import ConfigurationError, ProviderError
from l10n_resxporter.providers.base import (
    Exporter, Loader, relative_resource_path, required_option, row_for_path
)

_ = gettext.gettext

logger = logging.getLogger(__name__)

DELIMITER = ";"
FIXED_COLUMNS = 4


def header_row(cultures):
    header = ["Path", "Name", "Default Culture", "Comment"]
    for culture in cultures:
        header += [culture.name, "Comment"]
    return header


def culture_columns(header):
    """(culture, column index) for every culture header after the fixed ones."""
    columns = []
    for index in range(FIXED_COLUMNS, len(header)):
        culture = Culture.try_parse(header[index])
        if culture is not None:
            columns.append((culture, index))
    return columns


class JetBrainsCsvExporter(Exporter):
    """Writes all rows into a single CSV file.

    Options: ``output`` is a file, or a directory receiving
    ``JetBrainsCsv-full.csv`` (``-partial`` when only missing rows are
    exported). The default is the working directory.
    """

    name = "JetBrainsCsv"

    def __init__(self, options):
        self.output = options.get("output")

    def output_file(self, only_missing):
        default_name = "{}-{}.csv".format(self.name, "partial" if only_missing else "full")
        if not self.output:
            return Path.cwd() / default_name
        target = Path(os.path.abspath(self.output))
        if target.is_dir() or self.output.endswith(("/", os.sep)):
            return target / default_name
        return target

    def export(self, rows, settings):
        cultures = sorted(settings.cultures)
        path = self.output_file(settings.only_missing)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f, delimiter=DELIMITER)
            writer.writerow(header_row(cultures))
            for row in sorted(rows, key=lambda r: r.key):
                record = [relative_resource_path(row.base_file), row.key,
                          row.values.get(DEFAULT_CULTURE, ""), ""]
                for culture in cultures:
                    record += [row.values.get(culture, ""), ""]
                writer.writerow(record)

        logger.info(_("Exported {} rows to {}").format(len(rows), path))
        return path


class JetBrainsCsvLoader(Loader):
    """Reads rows from the CSV file given by the ``input`` option."""

    name = "JetBrainsCsv"

    def __init__(self, options):
        self.input = Path(os.path.abspath(required_option(options, "input")))
        if not self.input.is_file():
            raise ConfigurationError(_("CSV file not found: {}").format(self.input))

    def fetch(self):
        with open(self.input, newline="", encoding="utf-8-sig") as f:
            reader = csv.reader(f, delimiter=DELIMITER)
            header = next(reader, None)
            if not header:
                raise ProviderError(_("CSV file is empty or has an invalid format."))
            columns = culture_columns(header)
            logger.debug("Culture columns in %s: %s", self.input,
                         ", ".join(str(c) for c, _index in columns))

            for record in reader:
                if not record:
                    continue
                row = self._read_row(record, columns)
                if not row.key.strip():
                    logger.warning(_("Skipping line {} of {}: no resource name").format(
                        reader.line_num, self.input))
                    continue
                yield row

    @staticmethod
    def _read_row(record, columns):
        def field(index):
            return record[index] if index < len(record) else ""

        row = row_for_path(field(0), field(1))
        row.values[DEFAULT_CULTURE] = field(2)
        for culture, index in columns:
            translation = field(index)
            if translation.strip():
                row.values[culture] = translation
        return row
