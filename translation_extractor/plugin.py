"""Build-tool entry points.

``TranslationExtractor`` wires the walker, the extractor and the synchronizer
together the way a build host drives them:

- ``build_start()`` once per build: full scan of ``src_path`` and sync of
  every language/context file;
- ``handle_hot_update(path)`` for each changed file during a watch session:
  only that file's keys are synced. Incremental runs only ever add keys.

Errors: with ``strict`` (default) an unreadable or unparsable source aborts the
run before anything is written, and a run in which some translation file failed
ends with SynchronizationFailed. With ``strict=False`` bad sources are logged
and skipped, and failures are only reported.
"""
from __future__ import annotations

import pathlib
from typing import Any, Mapping, Optional, Sequence, Union

from . import plurals
from .config import ExtractorConfig
from .errors import ParseError, SourceReadError, SynchronizationFailed
from .extractor import extract_keys_from_file
from .keys import ExtractionResult, count_keys, merge_keys
from .sync import SyncReport, update_translations
from .utils.logging import get_extractor_logger
from .walker import is_ignored, is_source_file, iter_source_files


class TranslationExtractor:
    name = "translation-extractor"

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        *,
        plural_categories: Optional[Mapping[str, Sequence[str]]] = None,
        **options: Any,
    ) -> None:
        self.config = config if config is not None else ExtractorConfig.from_mapping(options)
        self.logger = get_extractor_logger(self.config.verbose)
        if plural_categories is None:
            plural_categories = plurals.plural_categories(self.config.languages)
        self.plural_categories = {lang: list(cats) for lang, cats in plural_categories.items()}

    # ── extraction ────────────────────────────────────────────────────────
    def _resolve(self, path: Union[str, pathlib.Path]) -> pathlib.Path:
        p = pathlib.Path(path)
        if not p.is_absolute():
            p = self.config.root / p
        return p.resolve()

    def is_applicable(self, path: Union[str, pathlib.Path]) -> bool:
        """True when ``path`` is a JS/TS file inside the configured source directory."""
        p = self._resolve(path)
        if not is_source_file(p):
            return False
        src_dir = self.config.src_dir
        try:
            p.relative_to(src_dir)
        except ValueError:
            return False
        return not (self.config.ignore and is_ignored(src_dir, p, self.config.ignore))

    def extract_file(self, path: Union[str, pathlib.Path]) -> ExtractionResult:
        try:
            return extract_keys_from_file(path, self.config.function_name, contexts=self.config.contexts)
        except (SourceReadError, ParseError) as e:
            if self.config.strict:
                raise
            self.logger.error("Skipping %s: %s", path, e)
            return {}

    def collect_keys(self) -> ExtractionResult:
        """Extract and merge the keys of every source file."""
        merged: ExtractionResult = {}
        scanned = 0
        for path in iter_source_files(self.config.src_dir, self.config.ignore):
            merged = merge_keys(merged, self.extract_file(path))
            scanned += 1
        self.logger.info("Extracted %d keys from %d files", count_keys(merged), scanned)
        return merged

    # ── synchronization ───────────────────────────────────────────────────
    def synchronize(self, keys: ExtractionResult, *, dry_run: bool = False, prune: bool = False) -> SyncReport:
        report = update_translations(
            keys,
            self.config.translations_dir,
            self.config.languages,
            self.plural_categories,
            dry_run=dry_run,
            prune=prune,
        )
        if report.failed and self.config.strict:
            raise SynchronizationFailed(report)
        return report

    # ── host hooks ────────────────────────────────────────────────────────
    def build_start(self, *, dry_run: bool = False, prune: bool = False) -> SyncReport:
        """Full run over the source tree."""
        self.logger.info("Starting translation extraction in %s", self.config.src_dir)
        return self.synchronize(self.collect_keys(), dry_run=dry_run, prune=prune)

    def handle_hot_update(self, path: Union[str, pathlib.Path], *, dry_run: bool = False) -> Optional[SyncReport]:
        """Incremental run for one changed file; None when the file is not a tracked source."""
        if not self.is_applicable(path):
            self.logger.debug("Ignoring change to %s", path)
            return None
        p = self._resolve(path)
        if not p.exists():
            # deletions never remove keys
            self.logger.info("Changed file no longer exists: %s", p)
            return None
        self.logger.info("File changed: %s", p)
        return self.synchronize(self.extract_file(p), dry_run=dry_run)
