# -*- coding: utf-8 -*-
"""
Test suite for extractor.py

Tests key extraction from JS/JSX/TS/TSX sources.
"""
from __future__ import annotations

import pathlib
import tempfile
import textwrap
import unittest

from translation_extractor.errors import ParseError, SourceReadError
from translation_extractor.extractor import (
    cook,
    dialect_for,
    extract_keys,
    extract_keys_from_file,
    parse_source,
)
from translation_extractor.keys import DEFAULT_CONTEXT, KeyMetadata


def keys_of(source: str, **kwargs):
    return extract_keys(textwrap.dedent(source), **kwargs).get(DEFAULT_CONTEXT, {})


class TestKeyArgument(unittest.TestCase):

    def test_string_literal(self):
        self.assertEqual(keys_of('t("greeting");'), {"greeting": KeyMetadata()})

    def test_single_quoted_literal(self):
        self.assertEqual(list(keys_of("t('farewell');")), ["farewell"])

    def test_template_keys_collapse(self):
        """Different interpolated expressions yield one key."""
        keys = keys_of("t(`Hello ${name}`);\nt(`Hello ${user.first}`);")
        self.assertEqual(list(keys), ["Hello ${}"])

    def test_template_with_several_substitutions(self):
        keys = keys_of("t(`${a} and ${b}!`);")
        self.assertEqual(list(keys), ["${} and ${}!"])

    def test_template_without_substitution(self):
        self.assertEqual(list(keys_of("t(`plain`);")), ["plain"])

    def test_escapes_are_decoded(self):
        keys = keys_of(r"""
            t("line\nbreak");
            t('it\'s');
            t("caf\u00e9");
            t("\x41BC");
        """)
        self.assertEqual(set(keys), {"line\nbreak", "it's", "café", "ABC"})

    def test_unpaired_surrogate_escape_is_kept(self):
        self.assertEqual(list(keys_of(r't("a\uD800b");')), ["a\ud800b"])

    def test_unresolvable_keys_are_skipped(self):
        keys = keys_of("""
            t(someVariable);
            t("a" + b);
            t(getKey());
            t();
        """)
        self.assertEqual(keys, {})

    def test_comment_before_key(self):
        self.assertEqual(list(keys_of('t(/* note */ "k");')), ["k"])

    def test_tagged_template_is_not_a_call(self):
        self.assertEqual(keys_of("t`tagged`;"), {})


class TestCallee(unittest.TestCase):

    def test_method_style_calls(self):
        keys = keys_of("""
            i18n.t("a");
            this.t("b");
            i18n?.t("c");
        """)
        self.assertEqual(set(keys), {"a", "b", "c"})

    def test_other_functions_are_ignored(self):
        keys = keys_of("""
            translate("x");
            obj.tx("y");
            t2("z");
            new t("w");
        """)
        self.assertEqual(keys, {})

    def test_custom_function_name(self):
        keys = keys_of('__("one"); t("two");', function_name="__")
        self.assertEqual(list(keys), ["one"])


class TestOptions(unittest.TestCase):

    def test_count_marks_plural(self):
        keys = keys_of('t("item", { count: n, name: user });')
        self.assertEqual(keys["item"], KeyMetadata(plural=True, params=frozenset({"count", "name"})))

    def test_shorthand_properties(self):
        keys = keys_of('t("item", { count, total });')
        self.assertEqual(keys["item"], KeyMetadata(plural=True, params=frozenset({"count", "total"})))

    def test_string_and_computed_keys(self):
        keys = keys_of("""t("x", { "user-name": u, 'a': 1, [field]: 2, [`tpl`]: 3 });""")
        self.assertEqual(keys["x"].params, frozenset({"user-name", "a", "field"}))

    def test_spread_is_ignored(self):
        keys = keys_of('t("x", { ...rest, extra: 1 });')
        self.assertEqual(keys["x"].params, frozenset({"extra"}))

    def test_non_object_second_argument(self):
        keys = keys_of('t("x", "fallback");')
        self.assertEqual(keys["x"], KeyMetadata())

    def test_duplicates_in_one_file_are_unioned(self):
        keys = keys_of("""
            t("k", { a: 1 });
            t("k", { count: 2 });
            t("k");
        """)
        self.assertEqual(keys["k"], KeyMetadata(plural=True, params=frozenset({"a", "count"})))

    def test_context_is_a_param_when_contexts_disabled(self):
        result = extract_keys('t("k", { context: "admin" });')
        self.assertEqual(result, {DEFAULT_CONTEXT: {"k": KeyMetadata(params=frozenset({"context"}))}})

    def test_context_routes_key_when_enabled(self):
        result = extract_keys('t("k", { context: "admin", name: n });\nt("k");', contexts=True)
        self.assertEqual(result["admin"], {"k": KeyMetadata(params=frozenset({"name"}))})
        self.assertEqual(result[DEFAULT_CONTEXT], {"k": KeyMetadata()})

    def test_non_literal_context_stays_default(self):
        result = extract_keys('t("k", { context: ctx });', contexts=True)
        self.assertEqual(result, {DEFAULT_CONTEXT: {"k": KeyMetadata()}})

    def test_path_like_context_stays_default(self):
        with self.assertLogs("translation_extractor.extractor", level="WARNING"):
            result = extract_keys('t("a", { context: "../../x" });\nt("b", { context: "" });\nt("c", { context: "a/b" });', contexts=True)
        self.assertEqual(list(result), [DEFAULT_CONTEXT])
        self.assertEqual(set(result[DEFAULT_CONTEXT]), {"a", "b", "c"})


class TestDialects(unittest.TestCase):

    def test_jsx(self):
        src = """
            export const Title = ({ n }) => (
                <h1 title={t("title.tooltip")}>{t("title.text", { count: n })}</h1>
            );
        """
        keys = keys_of(src)
        self.assertEqual(set(keys), {"title.tooltip", "title.text"})
        self.assertTrue(keys["title.text"].plural)

    def test_typescript(self):
        src = """
            interface Props { name: string }
            const value = <string>raw;
            export function label(p: Props): string {
                return t<string>("typed", { name: p.name });
            }
        """
        keys = keys_of(src, dialect="typescript")
        self.assertEqual(keys["typed"].params, frozenset({"name"}))

    def test_dialect_for_suffix(self):
        self.assertEqual(dialect_for("a/b.ts"), "typescript")
        self.assertEqual(dialect_for("a/b.tsx"), "tsx")
        self.assertEqual(dialect_for("a/b.js"), "tsx")
        self.assertEqual(dialect_for("a/b.jsx"), "tsx")

    def test_unknown_dialect(self):
        with self.assertRaises(ValueError):
            parse_source("t('x')", dialect="coffee")


class TestErrors(unittest.TestCase):

    def test_parse_error_is_raised(self):
        with self.assertRaises(ParseError) as ctx:
            extract_keys('const x = {;\nt("never");')
        self.assertIsNotNone(ctx.exception.line)

    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = pathlib.Path(tmp) / "bad.js"
            p.write_bytes(b"t('\xff\xfe');")
            with self.assertRaises(SourceReadError):
                extract_keys_from_file(p)

    def test_missing_file(self):
        with self.assertRaises(SourceReadError):
            extract_keys_from_file("/nonexistent/dir/file.ts")

    def test_file_extraction_uses_suffix_dialect(self):
        with tempfile.TemporaryDirectory() as tmp:
            p = pathlib.Path(tmp) / "cast.ts"
            p.write_text('const v = <number>x;\nt("from.ts");\n', encoding="utf-8")
            self.assertEqual(list(extract_keys_from_file(p)[DEFAULT_CONTEXT]), ["from.ts"])


class TestCook(unittest.TestCase):

    def test_simple_escapes(self):
        self.assertEqual(cook(r"a\tb\\c\"d"), 'a\tb\\c"d')

    def test_unicode_code_point_and_surrogates(self):
        self.assertEqual(cook(r"\u{1F600}"), "\U0001F600")
        self.assertEqual(cook(r"\uD83D\uDE00"), "\U0001F600")

    def test_line_continuation(self):
        self.assertEqual(cook("a\\\nb"), "ab")


if __name__ == "__main__":
    unittest.main()
