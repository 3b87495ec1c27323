#!/usr/bin/env python3
"""
Test Diff Parsing

Tests for extracting token additions, removals and modifications from
unified diffs.
"""

import unittest
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from token_scanner.diff_parsing import extract_token_from_line, parse_token_changes


def summarize(changes):
    return [(c.kind, c.token_name, c.old_value, c.new_value) for c in changes]


class TestExtractTokenFromLine(unittest.TestCase):
    """Test the token line grammars."""

    def test_grammars(self):
        cases = {
            "$primary: #fff;": ("$primary", "#fff"),
            "  --gap-sm:  4px ;": ("--gap-sm", "4px"),
            '  "color.red": "#f00",': ("color.red", "#f00"),
        }
        for line, expected in cases.items():
            with self.subTest(line=line):
                self.assertEqual(tuple(extract_token_from_line(line)), expected)

    def test_non_token_lines(self):
        for line in ("", ".btn { color: red }", "// $comment", "@include theme;"):
            with self.subTest(line=line):
                self.assertIsNone(extract_token_from_line(line))


class TestParseTokenChanges(unittest.TestCase):
    """Test pairing of removed and added token definitions."""

    def test_modification_removal_and_addition(self):
        diff = "\n".join([
            "diff --git a/tokens.scss b/tokens.scss",
            "index 1111111..2222222 100644",
            "--- a/tokens.scss",
            "+++ b/tokens.scss",
            "@@ -10,4 +10,4 @@",
            " $keep: 1px;",
            "-$primary: #000;",
            "+$primary: #111;",
            "-$gone: 2px;",
            "+$fresh: 3px;",
        ])
        changes = parse_token_changes(diff)
        self.assertEqual(summarize(changes), [
            ("updated", "$primary", "#000", "#111"),
            ("removed", "$gone", "2px", None),
            ("added", "$fresh", None, "3px"),
        ])
        self.assertEqual([c.line_number for c in changes], [11, 12, 12])

    def test_removal_only(self):
        changes = parse_token_changes("@@ -1,1 +0,0 @@\n-$old: 1px;")
        self.assertEqual(summarize(changes), [("removed", "$old", "1px", None)])
        self.assertIsNone(changes[0].new_value)

    def test_addition_only(self):
        changes = parse_token_changes("@@ -1,0 +1,1 @@\n+--brand: #123456;")
        self.assertEqual(summarize(changes), [("added", "--brand", None, "#123456")])
        self.assertIsNone(changes[0].old_value)

    def test_json_tokens(self):
        diff = '@@ -3,1 +3,1 @@\n-  "color.primary": "#000",\n+  "color.primary": "#111",'
        self.assertEqual(summarize(parse_token_changes(diff)), [("updated", "color.primary", "#000", "#111")])

    def test_lookahead_window(self):
        diff = "\n".join([
            "@@ -1,1 +1,5 @@",
            "-$a: 1;",
            "+$b: 1;",
            "+$c: 1;",
            "+$d: 1;",
            "+$e: 1;",
            "+$a: 2;",
        ])
        default = summarize(parse_token_changes(diff))
        self.assertEqual(default[0], ("removed", "$a", "1", None))
        self.assertEqual(default[-1], ("added", "$a", None, "2"))
        self.assertEqual(len(default), 6)

        wider = summarize(parse_token_changes(diff, lookahead=5))
        self.assertEqual(wider[0], ("updated", "$a", "1", "2"))
        self.assertEqual([c[1] for c in wider[1:]], ["$b", "$c", "$d", "$e"])

    def test_each_addition_pairs_once(self):
        diff = "\n".join([
            "@@ -1,2 +1,2 @@",
            "-$a: 1;",
            "-$a: 2;",
            "+$a: 3;",
            "+$a: 4;",
        ])
        self.assertEqual(summarize(parse_token_changes(diff)), [
            ("updated", "$a", "1", "3"),
            ("updated", "$a", "2", "4"),
        ])

    def test_hunk_header_resets_line_numbers(self):
        diff = "@@ -5,1 +5,1 @@\n+$x: 1;\n@@ -40,1 +41,1 @@\n context\n+$y: 2;"
        self.assertEqual([c.line_number for c in parse_token_changes(diff)], [5, 41])

    def test_empty_and_malformed_input(self):
        for diff in (None, "", "garbage\n@@ -x @@\n+++\n---\n-\n+", "\n\n\n"):
            with self.subTest(diff=diff):
                self.assertEqual(parse_token_changes(diff), [])


if __name__ == "__main__":
    unittest.main()
