"""Extraction results and the union rule used to merge them.

An extraction result maps a context to the keys found in it::

    {"default": {"greeting": KeyMetadata(plural=True, params=frozenset({"count"}))}}

Merging is a plain fold over results. ``merge_keys`` never mutates its inputs,
so the order in which files are folded does not change the outcome.
"""
from __future__ import annotations

import dataclasses
from typing import Dict, FrozenSet, Iterable, Mapping

DEFAULT_CONTEXT = "default"


def is_valid_context(name: str) -> bool:
	"""A context names one directory below the translations root."""
	return bool(name) and name not in (".", "..") and not any(sep in name for sep in ("/", "\\", "\0"))


@dataclasses.dataclass(frozen=True)
class KeyMetadata:
	plural: bool = False
	params: FrozenSet[str] = frozenset()

	def union(self, other: "KeyMetadata") -> "KeyMetadata":
		return KeyMetadata(plural=self.plural or other.plural, params=self.params | other.params)

	def as_dict(self) -> Dict[str, object]:
		return {"plural": self.plural, "params": sorted(self.params)}


ContextKeys = Dict[str, KeyMetadata]
ExtractionResult = Dict[str, ContextKeys]


def add_key(result: ExtractionResult, key: str, meta: KeyMetadata, context: str = DEFAULT_CONTEXT) -> None:
	"""Record ``key`` in ``result`` in place, unioning with an earlier entry."""
	bucket = result.setdefault(context, {})
	existing = bucket.get(key)
	bucket[key] = meta if existing is None else existing.union(meta)


def merge_keys(acc: Mapping[str, Mapping[str, KeyMetadata]], new: Mapping[str, Mapping[str, KeyMetadata]]) -> ExtractionResult:
	"""Return a new result holding the union of ``acc`` and ``new``."""
	merged: ExtractionResult = {context: dict(keys) for context, keys in acc.items()}
	for context, keys in new.items():
		for key, meta in keys.items():
			add_key(merged, key, meta, context)
	return merged


def merge_all(results: Iterable[Mapping[str, Mapping[str, KeyMetadata]]]) -> ExtractionResult:
	merged: ExtractionResult = {}
	for result in results:
		merged = merge_keys(merged, result)
	return merged


def count_keys(result: Mapping[str, Mapping[str, KeyMetadata]]) -> int:
	return sum(len(keys) for keys in result.values())
