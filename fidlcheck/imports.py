# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import closure resolution.

Given a root document, find every file it imports directly or transitively.
The walk is a breadth-first traversal keyed by normalized absolute path with
an explicit visited set, so:

- every file is loaded and expanded at most once,
- cycles of any length (including a file importing itself) terminate,
- a file that fails to load is recorded as failed, never retried and never
  expanded; the walk carries on with everything else.

Relative import URIs resolve against the directory of the file that declares
them. The root's imports resolve against `cwd` when given (the directory the
caller considers current for the root), otherwise against the root's own
directory.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Mapping, Optional, Tuple

from fidlcheck.loader import LoaderLike, LoadFailure, call_loader
from fidlcheck.model import Document
from fidlcheck.paths import normalize_path, resolve_import

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailedImport:
	"""One import edge whose target could not be loaded."""

	importer: str
	target: str
	reason: str
	index: int  # position of the import in the importer's import list


@dataclass(frozen=True)
class ClosureResult:
	"""
	Outcome of `resolve_closure`.

	- `imports`: file -> files it imports directly, for the root and every file
	  that loaded. Targets that failed appear in the sets but not as keys.
	- `failed`: target path -> failure reason.
	- `failed_edges`: every (importer, target) edge that hit a failed target,
	  in discovery order.
	- `documents`: path -> Document for the root and every loaded file.
	"""

	root: str
	imports: Mapping[str, frozenset[str]]
	failed: Mapping[str, str] = field(default_factory=dict)
	failed_edges: Tuple[FailedImport, ...] = ()
	documents: Mapping[str, Document] = field(default_factory=dict)

	def __contains__(self, path: object) -> bool:
		return isinstance(path, str) and normalize_path(path) in self.imports

	def transitive_imports(self, path: Optional[str] = None) -> frozenset[str]:
		"""
		Every file reachable from `path` (default: the root) through import
		edges, excluding `path` itself unless a cycle leads back to it. Failed
		targets are included; they were imported even though they did not load.
		"""
		start = self.root if path is None else normalize_path(path)
		seen: set[str] = set()
		stack = list(self.imports.get(start, ()))
		while stack:
			cur = stack.pop()
			if cur in seen:
				continue
			seen.add(cur)
			# Failed targets have no entry; nothing to expand.
			for nxt in self.imports.get(cur, ()):
				if nxt not in seen:
					stack.append(nxt)
		return frozenset(seen)

	def is_imported(self, path: str) -> bool:
		"""True when the root (transitively) imports `path`."""
		return normalize_path(path) in self.transitive_imports()

	def loaded_documents(self) -> List[Document]:
		"""Root and every loaded import, sorted by path for stable iteration."""
		return [self.documents[p] for p in sorted(self.documents)]


def import_targets(doc: Document, base_dir: str) -> List[Tuple[int, str]]:
	"""(index, normalized absolute path) for each import of `doc`."""
	return [(i, resolve_import(imp.uri, base_dir)) for i, imp in enumerate(doc.imports)]


def resolve_closure(root: Document, cwd: Optional[str], loader: LoaderLike) -> ClosureResult:
	"""Compute the import closure of `root` (see module docstring)."""
	root_path = normalize_path(root.source_path)
	base_dir = normalize_path(cwd) if cwd else root.directory

	imports: Dict[str, frozenset[str]] = {}
	documents: Dict[str, Document] = {root_path: root}
	failed: Dict[str, str] = {}
	failed_edges: List[FailedImport] = []
	visited: set[str] = {root_path}

	pending: Deque[Tuple[str, List[Tuple[int, str]]]] = deque()
	root_targets = import_targets(root, base_dir)
	imports[root_path] = frozenset(t for _i, t in root_targets)
	pending.append((root_path, root_targets))

	while pending:
		importer, targets = pending.popleft()
		for index, target in targets:
			if target in failed:
				failed_edges.append(FailedImport(importer, target, failed[target], index))
				continue
			if target in visited:
				continue
			visited.add(target)
			result = call_loader(loader, target)
			if isinstance(result, LoadFailure):
				logger.info("import %s (from %s) failed to load: %s", target, importer, result.reason)
				failed[target] = result.reason
				failed_edges.append(FailedImport(importer, target, result.reason, index))
				continue
			documents[target] = result
			# Imports of a loaded file resolve against the identifier it was
			# loaded under, which is what the importer spelled.
			child_targets = import_targets(result, target.rpartition("/")[0] or "/")
			imports[target] = frozenset(t for _i, t in child_targets)
			logger.debug("expanded %s: %d import(s)", target, len(child_targets))
			pending.append((target, child_targets))

	return ClosureResult(
		root=root_path,
		imports=imports,
		failed=failed,
		failed_edges=tuple(failed_edges),
		documents=documents,
	)


__all__ = ["FailedImport", "ClosureResult", "import_targets", "resolve_closure"]
