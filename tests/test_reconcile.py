"""test_reconcile.py - writing imported rows back to resource files"""

import unittest

from base_test import BaseTestCase
from l10n_resxporter.culture import DEFAULT_CULTURE, Culture
from l10n_resxporter.errors import InvalidCultureError
from l10n_resxporter.reconcile import (
    find_resource_files, load_existing_entries, merge_entries, pivot_rows, reconcile
)
from l10n_resxporter.resource import KeyDict

DE = Culture('de')


def changes_by_name(results):
    return {result.path.name: result.changes for result in results}


class TestPivotRows(BaseTestCase):

    def test_groups_by_base_name_and_culture(self):
        lookup = pivot_rows([
            self.make_row('Hello', 'Hi', de='Hallo'),
            self.make_row('Bye', 'Bye'),
            self.make_row('Title', 'Errors', base_name='Errors', de='Fehler'),
        ])
        self.assertEqual(dict(lookup[('Strings', DEFAULT_CULTURE)]), {'Hello': 'Hi', 'Bye': 'Bye'})
        self.assertEqual(dict(lookup[('Strings', DE)]), {'Hello': 'Hallo'})
        self.assertEqual(dict(lookup[('Errors', DE)]), {'Title': 'Fehler'})

    def test_last_duplicate_wins_case_insensitively(self):
        lookup = pivot_rows([self.make_row('Hello', 'first'), self.make_row('HELLO', 'second')])
        entries = lookup[('Strings', DEFAULT_CULTURE)]
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries['hello'], 'second')


class TestMergeEntries(unittest.TestCase):

    def test_existing_entries_come_first(self):
        merged, changes = merge_entries(KeyDict({'b': '2', 'a': '1'}), KeyDict({'c': '3'}))
        self.assertEqual(list(merged.items()), [('b', '2'), ('a', '1'), ('c', '3')])
        self.assertEqual(changes, 1)

    def test_collision_kept_without_update(self):
        merged, changes = merge_entries(KeyDict({'Hello': 'Hi'}), KeyDict({'hello': 'Hey'}))
        self.assertEqual(dict(merged), {'Hello': 'Hi'})
        self.assertEqual(changes, 0)

    def test_collision_replaced_in_place_with_update(self):
        merged, changes = merge_entries(KeyDict({'Hello': 'Hi', 'Bye': 'Bye'}),
                                        KeyDict({'hello': 'Hey'}), update_existing=True)
        self.assertEqual(list(merged.items()), [('Hello', 'Hey'), ('Bye', 'Bye')])
        self.assertEqual(changes, 1)

    def test_identical_value_is_not_a_change(self):
        merged, changes = merge_entries(KeyDict({'Hello': 'Hi'}), KeyDict({'Hello': 'Hi'}),
                                        update_existing=True)
        self.assertEqual(changes, 0)


class TestFindResourceFiles(BaseTestCase):

    def test_recurses_into_subdirectories(self):
        self.write_resx('Strings.resx', {})
        self.write_resx('Strings.de.resx', {}, directory=self.root / 'de')
        files = find_resource_files(self.root)
        self.assertEqual(files[('Strings', DEFAULT_CULTURE)], self.root / 'Strings.resx')
        self.assertEqual(files[('Strings', DE)], self.root / 'de' / 'Strings.de.resx')

    def test_unknown_culture_is_an_error(self):
        self.write_resx('Strings.xx.resx', {})
        with self.assertRaises(InvalidCultureError):
            find_resource_files(self.root)


class TestLoadExistingEntries(BaseTestCase):

    def test_missing_and_empty_files(self):
        self.assertEqual(len(load_existing_entries(self.root / 'Missing.resx')), 0)
        (self.root / 'Empty.resx').touch()
        self.assertEqual(len(load_existing_entries(self.root / 'Empty.resx')), 0)

    def test_broken_file_warns_and_is_empty(self):
        (self.root / 'Broken.resx').write_text('<root><data', encoding='utf-8')
        with self.assertLogs('l10n_resxporter.reconcile', level='WARNING'):
            self.assertEqual(len(load_existing_entries(self.root / 'Broken.resx')), 0)


class TestReconcile(BaseTestCase):

    def test_keeps_existing_value_without_update(self):
        self.write_resx('Strings.resx', {'Hello': 'Hi'})
        results = reconcile([self.make_row('Hello', 'Hey')], self.root)
        self.assertEqual(self.read_resx('Strings.resx'), {'Hello': 'Hi'})
        self.assertEqual(len(results), 1)
        self.assertFalse(results[0].changed)

    def test_updates_existing_value_when_asked(self):
        self.write_resx('Strings.resx', {'Hello': 'Hi'})
        results = reconcile([self.make_row('Hello', 'Hey')], self.root, update_existing=True)
        self.assertEqual(self.read_resx('Strings.resx'), {'Hello': 'Hey'})
        self.assertTrue(results[0].changed)

    def test_adds_new_keys_and_preserves_others(self):
        self.write_resx('Strings.resx', {'Hello': 'Hi', 'Untouched': 'stays'})
        self.write_resx('Strings.de.resx', {'Hello': 'Hallo'})
        reconcile([self.make_row('Bye', 'Bye', de='Tschüss')], self.root)
        self.assertEqual(self.read_resx('Strings.resx'),
                         {'Hello': 'Hi', 'Untouched': 'stays', 'Bye': 'Bye'})
        self.assertEqual(self.read_resx('Strings.de.resx'), {'Hello': 'Hallo', 'Bye': 'Tschüss'})

    def test_creates_missing_files(self):
        results = reconcile([self.make_row('Hello', 'Hi', de='Hallo')], self.root)
        self.assertEqual(self.read_resx('Strings.resx'), {'Hello': 'Hi'})
        self.assertEqual(self.read_resx('Strings.de.resx'), {'Hello': 'Hallo'})
        self.assertTrue(all(result.created for result in results))
        self.assertEqual(changes_by_name(results), {'Strings.resx': 1, 'Strings.de.resx': 1})

    def test_creates_empty_default_file_for_translation_only_rows(self):
        reconcile([self.make_row('Hello', de='Hallo')], self.root)
        self.assertTrue((self.root / 'Strings.resx').is_file())
        self.assertEqual(self.read_resx('Strings.resx'), {})
        self.assertEqual(self.read_resx('Strings.de.resx'), {'Hello': 'Hallo'})

    def test_updates_file_in_subdirectory(self):
        sub = self.root / 'Resources'
        self.write_resx('Strings.resx', {'Hello': 'Hi'}, directory=sub)
        reconcile([self.make_row('Bye', 'Bye')], self.root)
        self.assertEqual(self.read_resx('Strings.resx', directory=sub), {'Hello': 'Hi', 'Bye': 'Bye'})
        self.assertFalse((self.root / 'Strings.resx').exists())

    def test_second_run_changes_nothing(self):
        rows = [self.make_row('Hello', 'Hi', de='Hallo'), self.make_row('Bye', 'Bye')]
        reconcile(rows, self.root)
        first = {p.name: p.read_bytes() for p in self.root.glob('*.resx')}
        results = reconcile(rows, self.root)
        second = {p.name: p.read_bytes() for p in self.root.glob('*.resx')}
        self.assertEqual(first, second)
        self.assertEqual(sum(result.changes for result in results), 0)

    def test_unchanged_file_is_not_rewritten(self):
        path = self.write_resx('Strings.resx', {'Hello': 'Hi'})
        path.write_bytes(path.read_bytes() + b'<!-- hand edited -->\n')
        before = path.read_bytes()
        reconcile([self.make_row('Hello', 'Hi')], self.root)
        self.assertEqual(path.read_bytes(), before)

    def test_broken_file_is_regenerated(self):
        (self.root / 'Strings.resx').write_text('<root><data', encoding='utf-8')
        with self.assertLogs('l10n_resxporter.reconcile', level='WARNING'):
            results = reconcile([self.make_row('Hello', 'Hi')], self.root)
        self.assertEqual(self.read_resx('Strings.resx'), {'Hello': 'Hi'})
        self.assertTrue(results[0].changed)

    def test_case_insensitive_collision_with_file(self):
        self.write_resx('Strings.resx', {'Hello': 'Hi'})
        results = reconcile([self.make_row('HELLO', 'Hey')], self.root, update_existing=True)
        self.assertEqual(self.read_resx('Strings.resx'), {'Hello': 'Hey'})
        self.assertEqual(results[0].changes, 1)


DESIGNER_RESX = """<?xml version="1.0" encoding="utf-8"?>
<root>
  <resheader name="resmimetype">
    <value>text/microsoft-resx</value>
  </resheader>
  <data name="Hello" xml:space="preserve">
    <value>Hi</value>
    <comment>Shown on the start page</comment>
  </data>
  <data name="Logo" type="System.Resources.ResXFileRef, System.Windows.Forms">
    <value>Resources\\logo.png;System.Drawing.Bitmap, System.Drawing</value>
  </data>
  <data name="Icon" mimetype="application/x-microsoft.net.object.bytearray.base64">
    <value>AAABAAEAEBA=</value>
  </data>
</root>
"""


class TestReconcileKeepsFileContent(BaseTestCase):

    def setUp(self):
        super().setUp()
        self.path = self.root / 'Strings.resx'
        self.path.write_text(DESIGNER_RESX, encoding='utf-8')

    def test_comments_and_typed_resources_survive_an_import(self):
        results = reconcile([self.make_row('Hello', 'Hey'), self.make_row('Bye', 'Bye')],
                            self.root, update_existing=True)
        text = self.path.read_text(encoding='utf-8')
        self.assertIn('<comment>Shown on the start page</comment>', text)
        self.assertIn('name="Logo"', text)
        self.assertIn('logo.png;System.Drawing.Bitmap', text)
        self.assertIn('name="Icon"', text)
        self.assertIn('AAABAAEAEBA=', text)
        self.assertEqual(self.read_resx('Strings.resx'), {'Hello': 'Hey', 'Bye': 'Bye'})
        self.assertEqual(results[0].changes, 2)

    def test_string_row_does_not_replace_a_typed_resource(self):
        before = self.path.read_bytes()
        with self.assertLogs('l10n_resxporter.resx', level='WARNING'):
            results = reconcile([self.make_row('Logo', 'logo')], self.root, update_existing=True)
        self.assertEqual(self.path.read_bytes(), before)
        self.assertFalse(results[0].changed)


if __name__ == '__main__':
    unittest.main()
