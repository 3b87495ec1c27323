#!/usr/bin/env python3
"""
Test File Discovery

Tests for include/exclude glob handling and the extension filter.
"""

import unittest
import tempfile
import os
import shutil
from pathlib import Path
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from token_scanner.config import DEFAULT_CONFIG
from token_scanner.exceptions import RepositoryNotFoundError
from token_scanner.file_discovery import FileDiscovery
from token_scanner.token_formats import get_token_formats
from token_scanner.utils import expand_braces, matches_any_glob


class TestGlobHelpers(unittest.TestCase):
    """Test brace expansion and exclude matching."""

    def test_expand_braces(self):
        self.assertEqual(expand_braces("**/*.{css,scss}"), ["**/*.css", "**/*.scss"])
        self.assertEqual(expand_braces("{a,b}/*.{x,y}"), ["a/*.x", "a/*.y", "b/*.x", "b/*.y"])
        self.assertEqual(expand_braces("src/*.css"), ["src/*.css"])

    def test_exclude_matches_nested_and_root(self):
        patterns = ["**/node_modules/**", "**/*.test.*"]
        self.assertTrue(matches_any_glob("node_modules/pkg/a.css", patterns))
        self.assertTrue(matches_any_glob("web/node_modules/pkg/a.css", patterns))
        self.assertTrue(matches_any_glob("button.test.js", patterns))
        self.assertFalse(matches_any_glob("src/button.js", patterns))


class TestFileDiscovery(unittest.TestCase):
    """Test file discovery over a temporary repository."""

    def setUp(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir) / "repo"
        files = [
            "src/a.css",
            "src/nested/b.scss",
            "src/notes.txt",
            "src/d.test.js",
            "node_modules/lib/x.css",
            "dist/e.css",
            "tokens.json",
            ".storybook/preview.css",
            ".cache/build/c.css",
            "src/.hidden.css",
        ]
        for rel in files:
            path = self.root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("/* */")

    def tearDown(self):
        """Clean up test environment."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def relative(self, paths):
        base = os.path.realpath(self.root)
        return [os.path.relpath(p, base).replace(os.sep, "/") for p in paths]

    def test_default_patterns(self):
        discovery = FileDiscovery(
            DEFAULT_CONFIG["include_patterns"],
            DEFAULT_CONFIG["exclude_patterns"],
            get_token_formats(),
        )
        files = discovery.discover(str(self.root))
        self.assertEqual(self.relative(files), ["src/a.css", "src/nested/b.scss", "tokens.json"])
        for path in files:
            self.assertTrue(os.path.isabs(path))

    def test_extension_filter(self):
        css_only = [f for f in get_token_formats() if f.name == "css-variables"]
        discovery = FileDiscovery(["**/*"], ["**/node_modules/**", "dist/**"], css_only)
        self.assertEqual(self.relative(discovery.discover(str(self.root))), ["src/a.css", "src/nested/b.scss"])

    def test_overlapping_includes_are_deduplicated(self):
        discovery = FileDiscovery(["**/*.css", "src/*.css"], ["**/node_modules/**", "**/dist/**"])
        self.assertEqual(self.relative(discovery.discover(str(self.root))), ["src/a.css"])

    def test_hidden_paths_need_explicit_pattern(self):
        discovery = FileDiscovery(["**/*.css", ".storybook/*.css"], ["**/node_modules/**", "dist/**"])
        self.assertEqual(self.relative(discovery.discover(str(self.root))), [".storybook/preview.css", "src/a.css"])

    def test_unusable_patterns_are_recorded(self):
        discovery = FileDiscovery(["", "src/*.css"])
        errors = []
        self.assertEqual(self.relative(discovery.discover(str(self.root), errors)), ["src/a.css"])
        self.assertEqual(len(errors), 1)
        self.assertIn("Invalid include pattern", errors[0])

    def test_absolute_patterns(self):
        base = os.path.realpath(self.root)
        errors = []
        inside = FileDiscovery([os.path.join(base, "src", "*.css")])
        self.assertEqual(self.relative(inside.discover(str(self.root), errors)), ["src/a.css"])
        self.assertEqual(errors, [])

        outside = FileDiscovery([os.path.join(self.temp_dir, "elsewhere", "*.css")])
        self.assertEqual(outside.discover(str(self.root), errors), [])
        self.assertEqual(len(errors), 1)
        self.assertIn("outside the repository", errors[0])

    def test_missing_root_raises(self):
        discovery = FileDiscovery(["**/*.css"])
        with self.assertRaises(RepositoryNotFoundError):
            discovery.discover(os.path.join(self.temp_dir, "missing"))

    def test_file_root_raises(self):
        discovery = FileDiscovery(["**/*.css"])
        with self.assertRaises(RepositoryNotFoundError):
            discovery.discover(str(self.root / "tokens.json"))


if __name__ == "__main__":
    unittest.main()
