# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Document loader seam.

The validators never touch the file system themselves. They are handed a
loader: any object with `load(identifier) -> Document | LoadFailure`, or a
plain function with the same signature. Identifiers are already normalized
(see `fidlcheck.paths`) by the time they reach a loader.

Two implementations ship here:
- `FileLoader` reads and parses files from disk,
- `InMemoryLoader` serves a fixed set of documents (tests, unsaved buffers).

Loaders report problems by returning `LoadFailure`, never by raising.
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Protocol, Union

from lark.exceptions import UnexpectedInput

from fidlcheck.model import Document
from fidlcheck.parser import FidlSyntaxError, parse_fidl
from fidlcheck.paths import normalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadFailure:
	"""A file that could not be turned into a Document."""

	path: str
	reason: str


LoadResult = Union[Document, LoadFailure]


class Loader(Protocol):
	def load(self, identifier: str) -> LoadResult:
		...


LoaderLike = Union[Loader, Callable[[str], LoadResult]]


def call_loader(loader: LoaderLike, identifier: str) -> LoadResult:
	"""
	Invoke a loader and coerce anything unexpected into a LoadFailure.

	Third-party loaders may raise or return junk; neither may escape into the
	closure walk.
	"""
	fn = getattr(loader, "load", None)
	if fn is None:
		fn = loader
	try:
		result = fn(identifier)  # type: ignore[operator]
	except Exception as err:
		logger.info("loader raised for %s: %s", identifier, err)
		return LoadFailure(path=identifier, reason=f"{type(err).__name__}: {err}")
	if isinstance(result, (Document, LoadFailure)):
		return result
	if result is None:
		return LoadFailure(path=identifier, reason="file not found")
	return LoadFailure(path=identifier, reason=f"loader returned {type(result).__name__}")


class FileLoader:
	"""
	Loads `.fidl` files from disk.

	Parsed documents are cached per path and reused while the file's mtime and
	size are unchanged, so validating many roots of one project parses each
	file once.
	"""

	def __init__(self, *, encoding: str = "utf-8") -> None:
		self.encoding = encoding
		self._cache: Dict[str, tuple[tuple[int, int], LoadResult]] = {}

	def load(self, identifier: str) -> LoadResult:
		path = normalize_path(identifier)
		try:
			st = os.stat(path)
		except OSError as err:
			return LoadFailure(path=path, reason=err.strerror or "file not found")
		stamp = (st.st_mtime_ns, st.st_size)
		cached = self._cache.get(path)
		if cached is not None and cached[0] == stamp:
			return cached[1]
		result = self._load_uncached(path)
		self._cache[path] = (stamp, result)
		return result

	def _load_uncached(self, path: str) -> LoadResult:
		try:
			raw = Path(path).read_bytes()
		except OSError as err:
			return LoadFailure(path=path, reason=err.strerror or str(err))
		try:
			source = raw.decode(self.encoding)
		except UnicodeDecodeError as err:
			return LoadFailure(path=path, reason=f"cannot decode as {self.encoding}: {err.reason}")
		digest = hashlib.sha256(raw).hexdigest()
		try:
			doc = parse_fidl(source, source_path=path, digest=digest)
		except UnexpectedInput as err:
			line = getattr(err, "line", "?")
			column = getattr(err, "column", "?")
			return LoadFailure(path=path, reason=f"syntax error at {line}:{column}")
		except FidlSyntaxError as err:
			return LoadFailure(path=path, reason=str(err))
		logger.debug("parsed %s (package %s)", path, doc.name)
		return doc

	def clear(self) -> None:
		self._cache.clear()


class InMemoryLoader:
	"""
	Serves documents from a mapping of path -> Document or source text.

	Source text is parsed on first load. Every requested identifier is
	appended to `requests`, which lets tests assert that a file was loaded
	once.
	"""

	def __init__(self, documents: Mapping[str, Union[Document, str]] | None = None) -> None:
		self._entries: Dict[str, Union[Document, str]] = {}
		self._parsed: Dict[str, LoadResult] = {}
		self.requests: list[str] = []
		for path, entry in (documents or {}).items():
			self.add(path, entry)

	def add(self, path: str, entry: Union[Document, str]) -> None:
		key = normalize_path(path)
		self._entries[key] = entry
		self._parsed.pop(key, None)

	def remove(self, path: str) -> None:
		key = normalize_path(path)
		self._entries.pop(key, None)
		self._parsed.pop(key, None)

	def documents(self) -> list[Document]:
		"""Every entry that loads successfully, sorted by path."""
		out: list[Document] = []
		for path in sorted(self._entries):
			result = self._resolve(path)
			if isinstance(result, Document):
				out.append(result)
		return out

	def load(self, identifier: str) -> LoadResult:
		key = normalize_path(identifier)
		self.requests.append(key)
		return self._resolve(key)

	def _resolve(self, key: str) -> LoadResult:
		if key in self._parsed:
			return self._parsed[key]
		entry = self._entries.get(key)
		if entry is None:
			return LoadFailure(path=key, reason="file not found")
		if isinstance(entry, Document):
			result: LoadResult = entry
		else:
			digest = hashlib.sha256(entry.encode("utf-8")).hexdigest()
			try:
				result = parse_fidl(entry, source_path=key, digest=digest)
			except UnexpectedInput as err:
				result = LoadFailure(path=key, reason=f"syntax error at {getattr(err, 'line', '?')}:{getattr(err, 'column', '?')}")
			except FidlSyntaxError as err:
				result = LoadFailure(path=key, reason=str(err))
		self._parsed[key] = result
		return result


__all__ = ["LoadFailure", "LoadResult", "Loader", "LoaderLike", "call_loader", "FileLoader", "InMemoryLoader"]
