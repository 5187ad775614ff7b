"""Source tree discovery."""
from __future__ import annotations

import fnmatch
import pathlib
from typing import Iterable, Iterator, List, Tuple, Union

SOURCE_EXTENSIONS: Tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")

PathLike = Union[str, pathlib.Path]


def is_source_file(path: PathLike) -> bool:
	return pathlib.Path(path).suffix in SOURCE_EXTENSIONS


def is_ignored(base: pathlib.Path, path: pathlib.Path, ignore_globs: Iterable[str]) -> bool:
	try:
		rel = str(path.relative_to(base)).replace("\\", "/")
	except ValueError:
		return True
	return any(fnmatch.fnmatch(rel, pat) for pat in ignore_globs)


def iter_source_files(root: PathLike, ignore: Iterable[str] = ()) -> Iterator[pathlib.Path]:
	"""Yield every JS/TS source file below ``root``.

	Directories are visited with an explicit stack. I/O errors, including a
	missing ``root``, are not caught.
	"""
	base = pathlib.Path(root)
	ignore_globs: List[str] = list(ignore)
	stack = [base]
	while stack:
		directory = stack.pop()
		for entry in sorted(directory.iterdir()):
			if entry.is_dir():
				stack.append(entry)
			elif is_source_file(entry):
				if ignore_globs and is_ignored(base, entry, ignore_globs):
					continue
				yield entry
