#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright 2026 Daniel Nylander <daniel@danielnylander.se>

"""Microsoft Lists (SharePoint lists through Microsoft Graph).

Every resource key is one list item. The item title is the key, ``Path``
holds the resource path and each culture has a column named
``lang_x003a_<culture>`` (``lang_x003a_default`` for the source text).
``LastSyncedAt`` records when the item was last written by this tool, so
items edited in the list afterwards are not overwritten.
"""

import gettext
import logging
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone

import requests

from l10n_resxporter.culture import DEFAULT_CULTURE, Culture
from l10n_resxporter.errors import AuthenticationError, ProviderError
from l10n_resxporter.providers.base import (
    Exporter, Loader, boolean_option, integer_option, relative_resource_path,
    required_option, row_for_path
)

_ = gettext.gettext

logger = logging.getLogger(__name__)

GRAPH_URL = "https://graph.microsoft.com/v1.0"
TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
LANG_PREFIX = "lang_x003a_"
TIMEOUT = 30


def culture_field(culture):
    return LANG_PREFIX + ("default" if culture.is_default else culture.name)


def parse_timestamp(value):
    if not value:
        return None
    try:
        stamp = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ProviderError(_("Invalid timestamp '{}'").format(value)) from e
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


class GraphClient:
    """The few Graph calls needed for one list, over a shared session."""

    def __init__(self, options, session=None):
        self.client_id = required_option(options, "clientId")
        self.client_secret = required_option(options, "clientSecret")
        self.tenant_id = required_option(options, "tenantId")
        self.site_id = required_option(options, "siteId")
        self.list_id = required_option(options, "listId")
        self.session = session or requests.Session()

    @property
    def items_url(self):
        return "{}/sites/{}/lists/{}/items".format(GRAPH_URL, self.site_id, self.list_id)

    def request(self, method, url, **kwargs):
        try:
            return self.session.request(method, url, timeout=TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise ProviderError(_("{} {} failed: {}").format(method, url, e)) from e

    @staticmethod
    def check(response, what):
        if not response.ok:
            raise ProviderError(_("{} failed: {} {}").format(
                what, response.status_code, response.reason))

    @staticmethod
    def payload(response, what):
        """The JSON object of a response."""
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(_("{} returned an invalid response: {}").format(what, e)) from e
        if not isinstance(body, dict):
            raise ProviderError(_("{} returned an invalid response").format(what))
        return body

    def authenticate(self):
        """Fetch an app-only token; nothing else works without it."""
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": GRAPH_SCOPE,
            "grant_type": "client_credentials",
        }
        try:
            response = self.request("POST", TOKEN_URL.format(tenant=self.tenant_id), data=data)
            self.check(response, _("Token request"))
            token = self.payload(response, _("Token request"))["access_token"]
        except (ProviderError, KeyError) as e:
            raise AuthenticationError(
                _("Failed to obtain access token: {}").format(e)) from e
        self.session.headers["Authorization"] = "Bearer " + token

    def find_item(self, key):
        """The list item titled ``key``, or None."""
        params = {
            "$expand": "fields($select=Title,LastSyncedAt)",
            "$select": "id,lastModifiedDateTime",
            "$filter": "fields/Title eq '{}'".format(key.replace("'", "''")),
        }
        what = _("Lookup of {}").format(key)
        response = self.request("GET", self.items_url, params=params)
        self.check(response, what)
        items = self.payload(response, what).get("value", [])
        if not items:
            return None
        item = items[0]
        fields = item.get("fields", {})
        return {
            "id": item.get("id", ""),
            "modified": item.get("lastModifiedDateTime", ""),
            "last_synced_at": fields.get("LastSyncedAt", ""),
            "etag": item.get("@odata.etag", ""),
        }

    def create_item(self, fields):
        response = self.request("POST", self.items_url, json={"fields": fields})
        self.check(response, _("Create of {}").format(fields.get("Title")))

    def update_item(self, item, fields):
        """PATCH the item; False when it changed since it was looked up."""
        headers = {"If-Match": item["etag"]} if item.get("etag") else {}
        url = "{}/{}/fields".format(self.items_url, item["id"])
        response = self.request("PATCH", url, json=fields, headers=headers)
        if response.status_code == 412:
            return False
        self.check(response, _("Update of {}").format(item["id"]))
        return True

    def iter_items(self):
        url = self.items_url + "?$expand=fields"
        while url:
            response = self.request("GET", url)
            self.check(response, _("Listing items"))
            page = self.payload(response, _("Listing items"))
            items = page.get("value", [])
            logger.info(_("{} item(s) found").format(len(items)))
            yield from items
            url = page.get("@odata.nextLink")


class MicrosoftListsExporter(Exporter):
    """Creates or updates one list item per row.

    Options: ``clientId``, ``clientSecret``, ``tenantId``, ``siteId`` and
    ``listId`` are required. ``updateExistingItems=true`` also updates items
    that already exist, ``maxParallelism`` caps concurrent requests.
    """

    name = "MicrosoftLists"

    def __init__(self, options, session=None):
        self.client = GraphClient(options, session)
        self.update_existing = boolean_option(options, "updateExistingItems")
        self.max_workers = integer_option(options, "maxParallelism", os.cpu_count() or 1)

    @staticmethod
    def item_fields(row):
        fields = {
            "Path": relative_resource_path(row.base_file),
            "LastSyncedAt": datetime.now(timezone.utc).isoformat(),
        }
        for culture, value in row.values.items():
            fields[culture_field(culture)] = value
        return fields

    def sync_row(self, row):
        """Bring the item for ``row`` up to date and say what was done."""
        item = self.client.find_item(row.key)
        if item is None:
            fields = {"Title": row.key}
            fields.update(self.item_fields(row))
            self.client.create_item(fields)
            return "created"
        if not self.update_existing:
            return "unchanged"

        modified = parse_timestamp(item["modified"])
        synced = parse_timestamp(item["last_synced_at"])
        if synced is None or (modified is not None and modified > synced):
            return "skipped"
        if not self.client.update_item(item, self.item_fields(row)):
            return "conflict"
        return "updated"

    def export(self, rows, settings):
        self.client.authenticate()

        outcomes = Counter()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self.sync_row, row): row
                       for row in sorted(rows, key=lambda r: r.key)}
            for future in as_completed(futures):
                row = futures[future]
                try:
                    outcome = future.result()
                except ProviderError as e:
                    outcomes["failed"] += 1
                    logger.error(_("Failed to sync item {}: {}").format(row.key, e))
                    continue
                outcomes[outcome] += 1
                if outcome == "skipped":
                    logger.warning(_("{} skipped, edited in the list since the last sync").format(row.key))
                elif outcome == "conflict":
                    logger.warning(_("{} skipped, changed while updating").format(row.key))
                else:
                    logger.debug("%s %s", row.key, outcome)

        logger.info(", ".join("{} {}".format(count, outcome)
                              for outcome, count in sorted(outcomes.items())))
        return outcomes


class MicrosoftListsLoader(Loader):
    """Reads every item of the list. Takes the same options as the exporter."""

    name = "MicrosoftLists"

    def __init__(self, options, session=None):
        self.client = GraphClient(options, session)

    def fetch(self):
        self.client.authenticate()
        for item in self.client.iter_items():
            row = self.row_from_item(item)
            if row is not None:
                yield row

    @staticmethod
    def row_from_item(item):
        fields = item.get("fields", {})
        key = fields.get("Title")
        if not key:
            logger.warning(_("Ignoring list item {} without a title").format(item.get("id")))
            return None

        row = row_for_path(fields.get("Path") or "", key)
        for name, value in fields.items():
            if not name.startswith(LANG_PREFIX):
                continue
            tag = name[len(LANG_PREFIX):]
            if tag.lower() == "default":
                row.values[DEFAULT_CULTURE] = value or ""
                continue
            culture = Culture.try_parse(tag)
            if culture is not None and value:
                row.values[culture] = value
        return row
