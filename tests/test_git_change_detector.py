#!/usr/bin/env python3
"""
Test Git Change Detection

Tests for the commit pointer stores, token file filtering and the change
detector against throwaway repositories built with GitPython.
"""

import unittest
import tempfile
import os
import shutil
from pathlib import Path
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import git

from token_scanner.config import set_verbose
from token_scanner.git_analysis import (
    FileCommitPointerStore, GitChangeDetector, MemoryCommitPointerStore,
    get_change_type, infer_token_category, is_token_file, summarize_token_changes,
)
from token_scanner.models import ChangeType, CommitInfo, GitChange, TokenChange

HAS_GIT_EXECUTABLE = shutil.which("git") is not None


class TestTokenFileHelpers(unittest.TestCase):
    """Test file filtering and classification helpers."""

    def test_is_token_file(self):
        for path in ("src/_tokens.scss", "design-tokens.json", "styles/theme.css",
                     "styles/foundation-grid.scss", "Colors.TS", "src/_variables.scss"):
            with self.subTest(path=path):
                self.assertTrue(is_token_file(path))
        for path in ("README.md", "src/app.js", "styles/button.scss"):
            with self.subTest(path=path):
                self.assertFalse(is_token_file(path))

    def test_change_type(self):
        self.assertEqual(get_change_type("A"), ChangeType.ADDED)
        self.assertEqual(get_change_type("D"), ChangeType.DELETED)
        self.assertEqual(get_change_type("M"), ChangeType.MODIFIED)
        self.assertEqual(get_change_type("R100"), ChangeType.MODIFIED)

    def test_infer_token_category(self):
        self.assertEqual(infer_token_category("styles/colors.scss"), "colors")
        self.assertEqual(infer_token_category("styles/spacing.scss"), "spacing")
        self.assertEqual(infer_token_category("tokens.json"), "misc")


class TestPointerStores(unittest.TestCase):
    """Test the last processed commit stores."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_memory_store(self):
        store = MemoryCommitPointerStore()
        self.assertIsNone(store.load())
        store.save("abc123")
        self.assertEqual(store.load(), "abc123")

    def test_file_store(self):
        path = os.path.join(self.temp_dir, "state", "last-scan-commit.txt")
        store = FileCommitPointerStore(path)
        self.assertIsNone(store.load())
        store.save("abc123")
        self.assertEqual(Path(path).read_text(), "abc123")
        self.assertEqual(FileCommitPointerStore(path).load(), "abc123")

    def test_empty_file_means_no_pointer(self):
        path = os.path.join(self.temp_dir, "pointer.txt")
        Path(path).write_text("\n")
        self.assertIsNone(FileCommitPointerStore(path).load())


class TestSummarizeTokenChanges(unittest.TestCase):
    """Test flattening commits into token change records."""

    def test_records_and_severity(self):
        commit = CommitInfo(
            hash="0123456789abcdef", author="Dana", date="2024-01-01 10:00:00 +0000", message="Tweak colors",
            changes=[
                GitChange(type=ChangeType.MODIFIED, file="styles/colors.scss", token_changes=[
                    TokenChange("$primary", 3, old_value="#000", new_value="#111"),
                    TokenChange("$legacy", 4, old_value="#333"),
                    TokenChange("$accent", 5, new_value="#f00"),
                ]),
                GitChange(type=ChangeType.ADDED, file="styles/spacing.scss"),
                GitChange(type=ChangeType.DELETED, file="styles/old-tokens.scss"),
            ],
        )
        records = summarize_token_changes([commit])
        self.assertEqual([(r.type, r.token_name, r.severity) for r in records], [
            ("updated", "$primary", "info"),
            ("removed", "$legacy", "warning"),
            ("added", "$accent", "info"),
            ("added", "spacing", "info"),
        ])
        self.assertEqual(records[0].commit, "01234567")
        self.assertEqual(records[0].category, "colors")
        self.assertEqual(records[0].description, "Tweak colors (by Dana)")
        self.assertEqual(records[3].new_value, "New token file")
        self.assertEqual(records[1].to_dict()["severity"], "warning")


class TestDetectorWithoutRepository(unittest.TestCase):
    """Unreachable repositories degrade to empty results."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        set_verbose(False)

    def tearDown(self):
        set_verbose(True)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_missing_path(self):
        detector = GitChangeDetector(os.path.join(self.temp_dir, "missing"))
        self.assertEqual(detector.get_changes_since_last_scan(), [])
        self.assertEqual(detector.get_recent_changes(24), [])

    def test_not_a_repository(self):
        detector = GitChangeDetector(self.temp_dir)
        self.assertEqual(detector.get_changes_since_last_scan(), [])


@unittest.skipUnless(HAS_GIT_EXECUTABLE, "git executable not available")
class TestGitChangeDetector(unittest.TestCase):
    """Test change detection against a real repository."""

    def setUp(self):
        """Set up a throwaway repository."""
        self.temp_dir = tempfile.mkdtemp()
        self.repo = git.Repo.init(self.temp_dir)
        self.actor = git.Actor("Test Author", "author@example.com")
        set_verbose(False)

    def tearDown(self):
        """Clean up test environment."""
        set_verbose(True)
        self.repo.close()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def commit(self, files, message):
        for rel, content in files.items():
            path = Path(self.temp_dir) / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        self.repo.index.add(list(files))
        return self.repo.index.commit(message, author=self.actor, committer=self.actor).hexsha

    def test_empty_repository(self):
        detector = GitChangeDetector(self.temp_dir)
        self.assertEqual(detector.get_changes_since_last_scan(), [])

    def test_first_scan_uses_lookback_and_filters_files(self):
        head = self.commit({"tokens.scss": "$primary: #000;\n", "README.md": "docs\n"}, "Add tokens")
        store = MemoryCommitPointerStore()
        commits = GitChangeDetector(self.temp_dir, pointer_store=store).get_changes_since_last_scan()

        self.assertEqual(len(commits), 1)
        self.assertEqual(commits[0].hash, head)
        self.assertEqual(commits[0].author, "Test Author")
        self.assertEqual(commits[0].message, "Add tokens")
        self.assertEqual([(c.type, c.file) for c in commits[0].changes], [(ChangeType.ADDED, "tokens.scss")])
        self.assertEqual(store.load(), head)

    def test_pointer_is_stable_without_new_commits(self):
        head = self.commit({"tokens.scss": "$primary: #000;\n"}, "Add tokens")
        store = MemoryCommitPointerStore()
        detector = GitChangeDetector(self.temp_dir, pointer_store=store)
        detector.get_changes_since_last_scan()

        self.assertEqual(detector.get_changes_since_last_scan(), [])
        self.assertEqual(store.load(), head)

    def test_changes_since_pointer(self):
        first = self.commit({"tokens.scss": "$primary: #000;\n"}, "Add tokens")
        second = self.commit({"tokens.scss": "$primary: #111;\n$accent: #f00;\n"}, "Update tokens")
        store = MemoryCommitPointerStore(first)
        commits = GitChangeDetector(self.temp_dir, pointer_store=store).get_changes_since_last_scan()

        self.assertEqual([c.hash for c in commits], [second])
        change = commits[0].changes[0]
        self.assertEqual(change.type, ChangeType.MODIFIED)
        self.assertIn("+$accent: #f00;", change.diff)
        self.assertEqual([(t.kind, t.token_name, t.old_value, t.new_value) for t in change.token_changes], [
            ("updated", "$primary", "#000", "#111"),
            ("added", "$accent", None, "#f00"),
        ])
        self.assertEqual(store.load(), second)

    def test_file_store_round_trip(self):
        head = self.commit({"colors.json": '{"red": "#f00"}\n'}, "Add colors")
        pointer_file = os.path.join(self.temp_dir, ".state", "pointer.txt")
        GitChangeDetector(self.temp_dir, pointer_store=FileCommitPointerStore(pointer_file)).get_changes_since_last_scan()

        detector = GitChangeDetector(self.temp_dir, pointer_store=FileCommitPointerStore(pointer_file))
        self.assertEqual(detector.last_processed_commit, head)
        self.assertEqual(detector.get_changes_since_last_scan(), [])

    def test_recent_changes_leave_pointer_alone(self):
        self.commit({"theme.css": ":root { --brand: #123; }\n"}, "Add theme")
        store = MemoryCommitPointerStore()
        commits = GitChangeDetector(self.temp_dir, pointer_store=store).get_recent_changes(24)

        self.assertEqual(len(commits), 1)
        self.assertIsNone(store.load())


if __name__ == "__main__":
    unittest.main()
