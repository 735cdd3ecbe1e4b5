#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Main entry point for the resource exporter."""

import argparse
import gettext
import logging
import os
import sys
import time
from pathlib import Path

# i18n setup
LOCALE_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'po')
if not os.path.isdir(LOCALE_DIR):
    LOCALE_DIR = '/usr/share/locale'
gettext.bindtextdomain('l10n-resxporter', LOCALE_DIR)
gettext.textdomain('l10n-resxporter')
_ = gettext.gettext

from l10n_resxporter.errors import ConfigurationError, ResxporterError
from l10n_resxporter.merge import (
    check_base_names, collect_resource_files, load_resource_files,
    merge_resources, observed_cultures, select_missing
)
from l10n_resxporter.providers import create_exporter, create_loader
from l10n_resxporter.reconcile import reconcile
from l10n_resxporter.resource import ExportSettings, KeyDict
from l10n_resxporter.settings import load_settings, provider_options

logger = logging.getLogger("l10n_resxporter")


def setup_logging(verbose=False):
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(handler)


def parse_option(text):
    """Split ``KEY=VALUE``."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ConfigurationError(
            _("Invalid option '{}', expected KEY=VALUE.").format(text))
    return key.strip(), value


def parse_exporter_options(texts):
    """Group ``EXPORTER:KEY=VALUE`` strings by exporter identifier."""
    grouped = {}
    for text in texts:
        identifier, sep, option = text.partition(":")
        if not sep or not identifier.strip():
            raise ConfigurationError(
                _("Invalid exporter option '{}', expected EXPORTER:KEY=VALUE.").format(text))
        key, value = parse_option(option)
        grouped.setdefault(identifier.strip().casefold(), KeyDict())[key] = value
    return grouped


def check_directory(path):
    if not path.is_dir():
        raise ConfigurationError(_("Path does not exist: {}").format(path))


def run_export(args, settings):
    """Export the resource files of a directory to every selected exporter."""
    started = time.monotonic()

    check_directory(args.path)
    check_base_names(args.path, args.files or [])
    if not args.exporters:
        raise ConfigurationError(_("No exporters specified."))

    cli_options = parse_exporter_options(args.exporter_args)
    selected = {identifier.casefold() for identifier in args.exporters}
    for identifier in cli_options:
        if identifier not in selected:
            logger.warning(_("Ignoring options for unselected exporter '{}'").format(identifier))

    exporters = []
    for identifier in args.exporters:
        options = provider_options(settings, "exporters", identifier)
        options.update(cli_options.get(identifier.casefold(), {}))
        exporters.append(create_exporter(identifier, options))

    files = collect_resource_files(args.path, args.files)
    logger.info(_("{} resource files found in {}").format(len(files), args.path))
    sources = load_resource_files(files)
    cultures = observed_cultures(sources)

    rows = merge_resources(sources, copy_translations=args.copy_translations)
    if args.only_missing:
        rows = select_missing(rows, cultures)

    export_settings = ExportSettings(only_missing=args.only_missing, cultures=cultures)
    for exporter in exporters:
        exporter.export(rows, export_settings)

    logger.info(_("Export completed successfully!"))
    logger.info(_("Elapsed time: {:.2f}s").format(time.monotonic() - started))
    return 0


def run_import(args, settings):
    """Import rows from the selected loader into the resource files."""
    check_directory(args.path)
    if not args.loader:
        raise ConfigurationError(_("No loader specified."))

    options = provider_options(settings, "loaders", args.loader)
    for text in args.loader_args:
        key, value = parse_option(text)
        options[key] = value
    loader = create_loader(args.loader, options)

    results = reconcile(loader.fetch(), args.path, update_existing=args.update_existing)
    updated = sum(1 for result in results if result.changed)
    logger.info(_("{} of {} files updated").format(updated, len(results)))
    return 0


def build_parser():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true",
                        help=_("Show debug output."))
    common.add_argument("--settings", metavar="FILE",
                        help=_("Settings file with default provider options."))

    parser = argparse.ArgumentParser(
        prog="l10n-resxporter",
        description=_("Exchange .resx translations with translation services."))
    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser("export", parents=[common],
                                 help=_("Export resource files."))
    export.add_argument("-p", "--path", type=Path, required=True,
                        help=_("Directory containing the .resx files."))
    export.add_argument("-f", "--file", dest="files", action="append", metavar="NAME",
                        help=_("Base name of a resource file to export (repeatable)."))
    export.add_argument("-e", "--exporter", dest="exporters", action="append",
                        default=[], metavar="EXPORTER",
                        help=_("Exporter to use (repeatable)."))
    export.add_argument("-a", "--exporter-arg", dest="exporter_args", action="append",
                        default=[], metavar="EXPORTER:KEY=VALUE",
                        help=_("Option for an exporter (repeatable)."))
    export.add_argument("--only-missing", action="store_true",
                        help=_("Export only keys with at least one missing translation."))
    export.add_argument("--copy-translations", action="store_true",
                        help=_("Fill missing translations from keys with the same default text."))
    export.set_defaults(func=run_export)

    import_ = commands.add_parser("import", parents=[common],
                                  help=_("Import translations into resource files."))
    import_.add_argument("-p", "--path", type=Path, required=True,
                         help=_("Directory containing the .resx files."))
    import_.add_argument("-l", "--loader", metavar="LOADER",
                         help=_("Loader to read translations with."))
    import_.add_argument("--update-existing", action="store_true",
                         help=_("Overwrite translations that already exist."))
    import_.add_argument("-a", "--loader-arg", dest="loader_args", action="append",
                         default=[], metavar="KEY=VALUE",
                         help=_("Option for the loader (repeatable)."))
    import_.set_defaults(func=run_import)

    return parser


def main(argv=None):
    """Entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        settings = load_settings(args.settings)
        return args.func(args, settings)
    except ResxporterError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
