# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbol index: qualified name -> set of declaring locations.

Every named top-level type collection and interface of every indexed document
becomes one `SymbolEntry` keyed by `package.elementName`. The collision
validator uses it to find elements declared by other files.

Which documents get indexed is the caller's choice:
- scoped: the root's import closure (cheap, exact for what gets generated),
- project-wide: every `.fidl` file of the project, imported or not.

Building the project-wide index for each validated file is wasteful, so
`ProjectIndexCache` keeps one snapshot per process. It rebuilds only when the
set of documents it is asked about differs from the one it was built from;
`invalidate()` drops it explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from fidlcheck.model import Document, Interface, PACKAGE_SEPARATOR
from fidlcheck.paths import normalize_path

logger = logging.getLogger(__name__)


class SymbolKind(Enum):
	TYPE_COLLECTION = "typeCollection"
	INTERFACE = "interface"


@dataclass(frozen=True)
class SymbolEntry:
	"""
	One declaration. Indexes sort entries by qualified name, then file path
	(then kind, for a file declaring both kinds under one name).
	"""

	qualified_name: str
	file: str
	package: str
	name: str
	kind: SymbolKind

	@property
	def is_interface(self) -> bool:
		return self.kind is SymbolKind.INTERFACE


def _sort_key(entry: SymbolEntry) -> tuple[str, str, str]:
	return (entry.qualified_name, entry.file, entry.kind.value)


class SymbolIndex:
	"""
	Immutable snapshot of declarations, keyed by qualified name.

	Iteration and `entries()` are sorted by qualified name, then file path, so
	anything derived from the index is reproducible.

	`file_packages` maps every indexed file to its package, including files
	that declare no named element (only an anonymous type collection, or
	nothing at all); they still occupy their package namespace.
	"""

	def __init__(
		self,
		by_name: Mapping[str, FrozenSet[SymbolEntry]],
		file_packages: Optional[Mapping[str, str]] = None,
	) -> None:
		self._by_name: Dict[str, FrozenSet[SymbolEntry]] = dict(by_name)
		self._sorted: Tuple[SymbolEntry, ...] = tuple(
			sorted((e for entries in self._by_name.values() for e in entries), key=_sort_key)
		)
		packages: Dict[str, str] = {e.file: e.package for e in self._sorted}
		packages.update(file_packages or {})
		self._file_packages: Tuple[Tuple[str, str], ...] = tuple(
			sorted(packages.items(), key=lambda fp: (fp[1], fp[0]))
		)

	def file_packages(self) -> Tuple[Tuple[str, str], ...]:
		"""(file, package) for every indexed file, sorted by package, then file."""
		return self._file_packages

	def lookup(self, qualified_name: str) -> FrozenSet[SymbolEntry]:
		return self._by_name.get(qualified_name, frozenset())

	def entries(self) -> Tuple[SymbolEntry, ...]:
		return self._sorted

	def files_declaring(self, package: str, name: str) -> List[str]:
		"""Sorted files that declare `name` in `package`."""
		qname = qualify(package, name)
		return sorted({e.file for e in self.lookup(qname)})

	def packages(self) -> FrozenSet[str]:
		return frozenset(p for _f, p in self._file_packages)

	def files(self) -> FrozenSet[str]:
		return frozenset(f for f, _p in self._file_packages)

	def __iter__(self) -> Iterator[SymbolEntry]:
		return iter(self._sorted)

	def __len__(self) -> int:
		return len(self._sorted)

	def __contains__(self, qualified_name: object) -> bool:
		return qualified_name in self._by_name

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, SymbolIndex):
			return NotImplemented
		return self._sorted == other._sorted and self._file_packages == other._file_packages

	def __repr__(self) -> str:
		return f"SymbolIndex({len(self._sorted)} entries)"


def qualify(package: str, name: str) -> str:
	if not package:
		return name
	return f"{package}{PACKAGE_SEPARATOR}{name}"


def build_index(documents: Iterable[Document]) -> SymbolIndex:
	"""
	Index every named type collection and interface of `documents`, and record
	the package of every document.
	"""
	by_name: Dict[str, set[SymbolEntry]] = {}
	file_packages: Dict[str, str] = {}
	count = 0
	for doc in documents:
		count += 1
		path = normalize_path(doc.source_path)
		file_packages[path] = doc.name
		for element in doc.elements():
			if not element.name:
				continue
			kind = SymbolKind.INTERFACE if isinstance(element, Interface) else SymbolKind.TYPE_COLLECTION
			entry = SymbolEntry(
				qualified_name=qualify(doc.name, element.name),
				file=path,
				package=doc.name,
				name=element.name,
				kind=kind,
			)
			by_name.setdefault(entry.qualified_name, set()).add(entry)
	logger.debug("indexed %d document(s), %d qualified name(s)", count, len(by_name))
	return SymbolIndex({k: frozenset(v) for k, v in by_name.items()}, file_packages)


def _fingerprint(documents: Iterable[Document]) -> FrozenSet[Tuple[str, str]]:
	# Loaders that do not compute a digest still produce distinct objects per
	# reload; fall back to object identity.
	return frozenset(
		(normalize_path(d.source_path), d.digest if d.digest is not None else f"id:{id(d)}") for d in documents
	)


class ProjectIndexCache:
	"""
	Process-wide cache of the project-wide index.

	`get()` returns the cached index when the document set is unchanged and
	rebuilds otherwise; `build()` always rebuilds; `invalidate()` forgets the
	snapshot. Validators only ever receive the resulting `SymbolIndex`.
	"""

	def __init__(self) -> None:
		self._fingerprint: Optional[FrozenSet[Tuple[str, str]]] = None
		self._index: Optional[SymbolIndex] = None
		self.builds = 0

	def build(self, documents: Iterable[Document]) -> SymbolIndex:
		docs = list(documents)
		self._index = build_index(docs)
		self._fingerprint = _fingerprint(docs)
		self.builds += 1
		logger.debug("project index rebuilt (%d entries)", len(self._index))
		return self._index

	def get(self, documents: Iterable[Document]) -> SymbolIndex:
		docs = list(documents)
		if self._index is not None and self._fingerprint == _fingerprint(docs):
			logger.debug("project index cache hit")
			return self._index
		return self.build(docs)

	def invalidate(self) -> None:
		self._index = None
		self._fingerprint = None

	@property
	def is_built(self) -> bool:
		return self._index is not None


PROJECT_INDEX_CACHE = ProjectIndexCache()


__all__ = [
	"SymbolKind",
	"SymbolEntry",
	"SymbolIndex",
	"qualify",
	"build_index",
	"ProjectIndexCache",
	"PROJECT_INDEX_CACHE",
]
