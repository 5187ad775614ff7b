#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
translation_extract.py: extract t() keys from JS/TS sources and sync the JSON translation files.

Key points
- Scans .js/.jsx/.ts/.tsx files below the source directory for calls to the translation
  function (``t("key")``, ``i18n.t(`Hello ${name}`)``, ``t("item", { count })``).
- Adds every missing key to <translations>/<lang>.json with an empty value; existing
  translations are never modified. Plural keys (``count`` option) expand to one entry
  per CLDR plural category of the language: item_one, item_other, ...
- Files are only rewritten when a key was added (sorted keys, 2-space indent).

Usage Examples
--------------

1. Full run with the defaults (src/ -> public/translations/{en,it}.json):
   translation-extractor

2. Options from package.json ("translationExtractor" section) or a JSON file:
   translation-extractor --config package.json

3. CI check: exit 1 when a translation file is missing keys (no writes):
   translation-extractor --languages en,fr --check --diff

4. Incremental run for one changed file (called by a watcher):
   translation-extractor --changed src/components/Header.tsx

5. Drop entries no longer produced by any t() call (full runs only):
   translation-extractor --prune --dry-run --diff
"""

from __future__ import annotations
import argparse
import pathlib
import sys
from typing import List, Optional

from translation_extractor.config import load_config
from translation_extractor.errors import ConfigError, SynchronizationFailed, TranslationExtractorError
from translation_extractor.plugin import TranslationExtractor


def run(args: argparse.Namespace) -> int:
	if args.prune and args.changed:
		print("--prune needs a full run; it cannot be combined with --changed", file=sys.stderr)
		return 2

	try:
		config = load_config(
			args.config,
			root=args.root,
			src_path=args.src,
			translations_path=args.translations,
			languages=args.languages,
			function_name=args.function_name,
			contexts=args.contexts,
			ignore=args.ignore or None,
			verbose=args.verbose,
			strict=False if args.keep_going else None,
		)
	except ConfigError as e:
		print(str(e), file=sys.stderr)
		return 2

	if not config.src_dir.is_dir():
		print(f"Source directory not found: {config.src_dir}", file=sys.stderr)
		return 2

	dry = args.dry_run or args.check
	plugin = TranslationExtractor(config)
	try:
		if args.changed:
			# relative to the caller, like every other path argument
			changed = pathlib.Path.cwd() / args.changed
			report = plugin.handle_hot_update(changed, dry_run=dry)
			if report is None:
				print(f"Not a tracked source file: {args.changed}")
				return 0
		else:
			report = plugin.build_start(dry_run=dry, prune=args.prune)
	except SynchronizationFailed as e:
		report = e.report
	except TranslationExtractorError as e:
		print(f"Error: {e}", file=sys.stderr)
		return 1

	if args.diff:
		sys.stdout.write("".join(o.diff() for o in report.changed))

	for outcome in report.failed:
		print(f"Failed: {outcome.error}", file=sys.stderr)

	if dry:
		print(f"\nDone (dry run). Files that would change: {len(report.changed)}")
	else:
		print(f"\nDone. Files changed: {len(report.written)}")

	if report.failed:
		return 1
	if args.check and report.changed:
		for outcome in report.changed:
			print(f"Missing keys in {outcome.path}: {', '.join(outcome.added)}")
		return 1
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="translation-extractor", description="Sync JSON translation files with the t() calls in a JS/TS source tree")
	ap.add_argument("--config", "-c", help="JSON config file, or a package.json with a translationExtractor section")
	ap.add_argument("--root", help="Directory relative paths resolve against (default: config file directory, else cwd)")
	ap.add_argument("--src", help="Source directory (default: src)")
	ap.add_argument("--translations", help="Translations directory (default: public/translations)")
	ap.add_argument("--languages", help="Language tags, comma-separated (default: en,it)")
	ap.add_argument("--function", dest="function_name", help="Translation function name (default: t)")
	ap.add_argument("--contexts", action="store_true", default=None, help="Honour the `context` option: keys go to <translations>/<context>/<lang>.json")
	ap.add_argument("--ignore", action="append", default=[], help="Glob patterns (relative to the source directory) to exclude (repeatable)")
	ap.add_argument("--changed", metavar="PATH", help="Incremental run for a single changed file")
	ap.add_argument("--dry-run", action="store_true", help="Report only; no writes")
	ap.add_argument("--diff", action="store_true", help="Print unified diff for changed translation files")
	ap.add_argument("--check", action="store_true", help="Exit 1 when a translation file is missing keys (implies --dry-run)")
	ap.add_argument("--prune", action="store_true", help="Also remove entries no t() call produces (full runs only)")
	ap.add_argument("--keep-going", action="store_true", help="Log and skip unreadable or unparsable sources instead of aborting")
	ap.add_argument("--verbose", "-v", action="store_true", default=None, help="Log progress and the result for every translation file")
	return ap


def main(argv: Optional[List[str]] = None) -> None:
	args = build_arg_parser().parse_args(argv)
	sys.exit(run(args))


if __name__ == "__main__":
	main()
