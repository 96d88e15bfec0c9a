# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Project enumeration for project-wide symbol indexing.

A project is every `*.fidl` file below a root directory, minus directories
named in `skip_dirs` (build output such as `bin/` usually holds copies of the
sources and would collide with everything).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from fidlcheck.loader import LoaderLike, LoadFailure, call_loader
from fidlcheck.model import Document
from fidlcheck.paths import normalize_path

logger = logging.getLogger(__name__)

FIDL_SUFFIX = ".fidl"


@dataclass(frozen=True)
class ProjectSnapshot:
	"""Documents of a project plus the files that failed to load."""

	root: str
	documents: Tuple[Document, ...]
	failures: Tuple[LoadFailure, ...] = ()


def discover_fidl_files(root: Path, *, skip_dirs: Iterable[str] = ("bin",)) -> List[Path]:
	"""Sorted `.fidl` files under `root`, skipping `skip_dirs` at any depth."""
	skip = set(skip_dirs)
	root = root.resolve()
	out: List[Path] = []
	for path in root.rglob(f"*{FIDL_SUFFIX}"):
		rel_parts = path.relative_to(root).parts[:-1]
		if any(part in skip for part in rel_parts):
			continue
		if path.is_file():
			out.append(path)
	return sorted(out)


def load_project(root: Path, loader: LoaderLike, *, skip_dirs: Iterable[str] = ("bin",)) -> ProjectSnapshot:
	"""Load every project file; load failures are collected, not raised."""
	documents: List[Document] = []
	failures: List[LoadFailure] = []
	for path in discover_fidl_files(root, skip_dirs=skip_dirs):
		result = call_loader(loader, normalize_path(str(path)))
		if isinstance(result, LoadFailure):
			failures.append(result)
			continue
		documents.append(result)
	logger.debug("project %s: %d document(s), %d failure(s)", root, len(documents), len(failures))
	return ProjectSnapshot(root=normalize_path(str(root.resolve())), documents=tuple(documents), failures=tuple(failures))


__all__ = ["FIDL_SUFFIX", "ProjectSnapshot", "discover_fidl_files", "load_project"]
