"""Synchronization of extracted keys into per-language JSON files.

Files live at ``<translations>/<lang>.json`` for the default context and at
``<translations>/<context>/<lang>.json`` otherwise. Each file is a flat
JSON object. Missing keys are added with an empty value; existing entries are
never touched. A file is rewritten (sorted, 2-space indent) only when a key
was added.
"""
from __future__ import annotations

import contextlib
import dataclasses
import difflib
import json
import logging
import os
import pathlib
import re
import tempfile
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from .errors import TranslationExtractorError, TranslationFileCorrupt, WriteError
from .keys import DEFAULT_CONTEXT, KeyMetadata, is_valid_context
from .plurals import DEFAULT_CATEGORIES

NEWLINE = "\n"

# unpaired surrogates cannot be encoded as UTF-8
_SURROGATE_RE = re.compile("[\ud800-\udfff]")

logger = logging.getLogger(__name__)

PathLike = Union[str, pathlib.Path]


# ── Per-file locking ──────────────────────────────────────────────────────────
_LOCKS: Dict[str, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


@contextlib.contextmanager
def file_lock(path: PathLike) -> Iterator[None]:
	"""Serialize read-merge-write cycles on one translation file within the process."""
	key = str(pathlib.Path(path).resolve())
	with _LOCKS_GUARD:
		lock = _LOCKS.setdefault(key, threading.Lock())
	with lock:
		yield


# ── Results ───────────────────────────────────────────────────────────────────
@dataclasses.dataclass
class SyncOutcome:
	path: pathlib.Path
	language: str
	context: str
	added: List[str] = dataclasses.field(default_factory=list)
	removed: List[str] = dataclasses.field(default_factory=list)
	written: bool = False
	error: Optional[TranslationExtractorError] = None
	# file text before/after, set only when the file changes
	before: Optional[str] = None
	after: Optional[str] = None

	@property
	def changed(self) -> bool:
		return self.error is None and bool(self.added or self.removed)

	def diff(self) -> str:
		if not self.changed:
			return ""
		return "".join(
			difflib.unified_diff(
				(self.before or "").splitlines(keepends=True),
				(self.after or "").splitlines(keepends=True),
				fromfile=f"a/{self.path}",
				tofile=f"b/{self.path}",
			)
		)

	def as_dict(self) -> Dict[str, Any]:
		return {
			"path": str(self.path),
			"language": self.language,
			"context": self.context,
			"added": list(self.added),
			"removed": list(self.removed),
			"written": self.written,
			"error": str(self.error) if self.error else None,
		}


@dataclasses.dataclass
class SyncReport:
	outcomes: List[SyncOutcome] = dataclasses.field(default_factory=list)

	@property
	def changed(self) -> List[SyncOutcome]:
		return [o for o in self.outcomes if o.changed]

	@property
	def written(self) -> List[SyncOutcome]:
		return [o for o in self.outcomes if o.written]

	@property
	def failed(self) -> List[SyncOutcome]:
		return [o for o in self.outcomes if o.error is not None]

	@property
	def ok(self) -> bool:
		return not self.failed

	def as_dict(self) -> Dict[str, Any]:
		return {
			"ok": self.ok,
			"changed": len(self.changed),
			"written": len(self.written),
			"failed": len(self.failed),
			"files": [o.as_dict() for o in self.outcomes],
		}


# ── File format ───────────────────────────────────────────────────────────────
def translation_file_path(translations_root: PathLike, context: str, language: str) -> pathlib.Path:
	root = pathlib.Path(translations_root)
	if context != DEFAULT_CONTEXT:
		root = root / context
	return root / f"{language}.json"


def _read_text(path: pathlib.Path) -> Optional[str]:
	try:
		return path.read_text(encoding="utf-8")
	except FileNotFoundError:
		return None
	except (UnicodeDecodeError, OSError) as e:
		raise TranslationFileCorrupt(path, f"unreadable: {e}") from e


def _parse_translations(path: pathlib.Path, raw: str) -> Dict[str, Any]:
	try:
		data = json.loads(raw)
	except ValueError as e:
		raise TranslationFileCorrupt(path, str(e)) from e
	if not isinstance(data, dict):
		raise TranslationFileCorrupt(path, f"expected a JSON object, got {type(data).__name__}")
	return data


def load_translations(path: PathLike) -> Dict[str, Any]:
	"""Return the mapping stored at ``path``; an absent file is an empty mapping."""
	p = pathlib.Path(path)
	raw = _read_text(p)
	return {} if raw is None else _parse_translations(p, raw)


def render_translations(translations: Mapping[str, Any]) -> str:
	ordered = {key: translations[key] for key in sorted(translations)}
	text = json.dumps(ordered, indent=2, ensure_ascii=False)
	return _SURROGATE_RE.sub(lambda m: f"\\u{ord(m.group(0)):04x}", text) + NEWLINE


def atomic_write(path: pathlib.Path, data: str) -> None:
	"""Atomically write ``data`` to ``path``.

	This function writes to a temporary file in the same directory, fsyncs,
	then replaces the target. If the target exists, its permissions are
	preserved when possible.
	"""
	tmp_dir = path.parent
	tmp_dir.mkdir(parents=True, exist_ok=True)
	try:
		orig_mode: Optional[int] = path.stat().st_mode & 0o777
	except OSError:
		orig_mode = None

	tmp_name = None
	try:
		with tempfile.NamedTemporaryFile("w", delete=False, dir=tmp_dir, encoding="utf-8", newline=NEWLINE) as tf:
			tmp_name = tf.name
			tf.write(data)
			tf.flush()
			os.fsync(tf.fileno())
		os.replace(tmp_name, str(path))
		tmp_name = None
		if orig_mode is not None:
			try:
				os.chmod(str(path), orig_mode)
			except OSError:
				logger.debug("Failed to chmod %s", path)
	finally:
		if tmp_name is not None and os.path.exists(tmp_name):
			os.unlink(tmp_name)


# ── Synchronization ───────────────────────────────────────────────────────────
def expected_entries(keys: Mapping[str, KeyMetadata], categories: Sequence[str]) -> List[str]:
	"""Translation-file entries the extracted ``keys`` require, in key order."""
	entries: Dict[str, None] = {}
	for key, meta in keys.items():
		if meta.plural:
			for category in categories:
				entries[f"{key}_{category}"] = None
		else:
			entries[key] = None
	return list(entries)


def sync_file(
	path: PathLike,
	keys: Mapping[str, KeyMetadata],
	categories: Sequence[str],
	*,
	language: str = "",
	context: str = DEFAULT_CONTEXT,
	dry_run: bool = False,
	prune: bool = False,
) -> SyncOutcome:
	"""Add the entries ``keys`` need to one translation file.

	With ``prune`` entries that ``keys`` do not produce are removed as well.
	Raises TranslationFileCorrupt or WriteError; nothing is written on error.
	"""
	p = pathlib.Path(path)
	outcome = SyncOutcome(path=p, language=language, context=context)
	with file_lock(p):
		raw = _read_text(p)
		translations = {} if raw is None else _parse_translations(p, raw)
		expected = expected_entries(keys, categories)

		for entry in expected:
			if entry not in translations:
				translations[entry] = ""
				outcome.added.append(entry)
		if prune:
			keep = set(expected)
			outcome.removed = sorted(entry for entry in translations if entry not in keep)
			for entry in outcome.removed:
				del translations[entry]

		if not outcome.changed:
			return outcome

		outcome.before = raw or ""
		outcome.after = render_translations(translations)
		if dry_run:
			return outcome
		try:
			atomic_write(p, outcome.after)
		except (OSError, ValueError) as e:
			raise WriteError(p, str(e)) from e
		outcome.written = True
	return outcome


def update_translations(
	keys: Mapping[str, Mapping[str, KeyMetadata]],
	translations_path: PathLike,
	languages: Sequence[str],
	plural_categories: Mapping[str, Sequence[str]],
	*,
	dry_run: bool = False,
	prune: bool = False,
) -> SyncReport:
	"""Synchronize every (context, language) file; a failing file does not stop the others."""
	report = SyncReport()
	for context in sorted(keys):
		for language in languages:
			path = translation_file_path(translations_path, context, language)
			categories = plural_categories.get(language) or DEFAULT_CATEGORIES
			try:
				if context != DEFAULT_CONTEXT and not is_valid_context(context):
					raise WriteError(path, f"invalid context name {context!r}")
				outcome = sync_file(
					path,
					keys[context],
					categories,
					language=language,
					context=context,
					dry_run=dry_run,
					prune=prune,
				)
			except TranslationExtractorError as e:
				logger.error("%s", e)
				report.outcomes.append(SyncOutcome(path=path, language=language, context=context, error=e))
				continue
			report.outcomes.append(outcome)
			if outcome.written:
				logger.info("Updated %s (+%d, -%d)", path, len(outcome.added), len(outcome.removed))
			elif outcome.changed:
				logger.info("Would update %s (+%d, -%d)", path, len(outcome.added), len(outcome.removed))
			else:
				logger.info("No update needed for %s", path)
	return report
