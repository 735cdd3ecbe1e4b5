#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Read and write the string resources of .resx files."""

import gettext
import logging
from pathlib import Path

from lxml import etree

from l10n_resxporter.errors import ResourceFileError
from l10n_resxporter.resource import KeyDict

_ = gettext.gettext

logger = logging.getLogger(__name__)

RESX_HEADERS = (
    ("resmimetype", "text/microsoft-resx"),
    ("version", "2.0"),
    ("reader", "System.Resources.ResXResourceReader, System.Windows.Forms, "
               "Version=4.0.0.0, Culture=neutral, PublicKeyToken=b77a5c561934e089"),
    ("writer", "System.Resources.ResXResourceWriter, System.Windows.Forms, "
               "Version=4.0.0.0, Culture=neutral, PublicKeyToken=b77a5c561934e089"),
)

XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


def _is_string_resource(data):
    """Binary and file-reference resources carry a mimetype or a type."""
    if data.get("mimetype"):
        return False
    res_type = data.get("type")
    return not res_type or res_type.startswith("System.String")


def _parse(path):
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        return etree.parse(str(path), parser)
    except (OSError, etree.XMLSyntaxError) as e:
        raise ResourceFileError(
            _("Failed to read '{}': {}").format(path, e)) from e


def read_resx(path):
    """Return the string resources of a .resx file.

    The result maps resource names, compared case-insensitively, to their
    values in file order.
    """
    entries = KeyDict()
    for data in _parse(path).getroot().findall("data"):
        name = data.get("name")
        if not name:
            continue
        if not _is_string_resource(data):
            logger.debug("Skipping non-string resource %s in %s", name, path)
            continue
        value = data.find("value")
        entries[name] = (value.text or "") if value is not None else ""
    return entries


def _data_element(name, text, indent):
    data = etree.Element("data", name=name)
    data.set(XML_SPACE, "preserve")
    data.text = indent + "  "
    value = etree.SubElement(data, "value")
    value.text = text
    value.tail = indent
    return data


def update_resx(path, entries):
    """Set ``entries`` in an existing .resx file and keep everything else.

    The value of a string resource with the same name is replaced, other
    names are appended as new ``<data>`` elements. Comments, typed and
    binary resources are left as they are; a name that belongs to one of
    those is not touched. Returns the number of entries written.
    """
    tree = _parse(path)
    root = tree.getroot()

    strings = {}
    others = set()
    for data in root.findall("data"):
        name = data.get("name")
        if not name:
            continue
        if _is_string_resource(data):
            strings.setdefault(name.casefold(), data)
        else:
            others.add(name.casefold())

    indent = root.text if root.text and not root.text.strip() else "\n  "
    written = 0
    for name, text in entries.items():
        data = strings.get(name.casefold())
        if data is not None:
            value = data.find("value")
            if value is None:
                value = etree.SubElement(data, "value")
            value.text = text
        elif name.casefold() in others:
            logger.warning(_("Not replacing non-string resource {} in {}").format(name, path))
            continue
        else:
            data = _data_element(name, text, indent)
            if len(root):
                last = root[-1]
                data.tail = last.tail
                last.tail = indent
            else:
                root.text = indent
                data.tail = "\n"
            root.append(data)
            strings[name.casefold()] = data
        written += 1

    if written:
        tree.write(str(path), encoding="utf-8", xml_declaration=True)
    return written


def write_resx(path, entries):
    """Write ``entries`` as a complete .resx document, replacing ``path``."""
    root = etree.Element("root")
    for name, text in RESX_HEADERS:
        header = etree.SubElement(root, "resheader", name=name)
        etree.SubElement(header, "value").text = text

    for name, text in entries.items():
        data = etree.SubElement(root, "data", name=name)
        data.set(XML_SPACE, "preserve")
        etree.SubElement(data, "value").text = text

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(etree.tostring(root, encoding="utf-8",
                                    xml_declaration=True, pretty_print=True))
