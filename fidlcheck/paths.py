# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import identifier normalization.

Import URIs in `.fidl` files come in every flavour a hand-edited project
produces: relative paths, absolute POSIX paths, Windows paths with a drive
letter and backslashes, and `file:` URIs. The closure resolver keys files by
the normalized form produced here, so two spellings of one file map to one
node:

- `\\` becomes `/`, runs of `/` collapse to one,
- a `file:` scheme and a device/drive prefix (`C:`) are stripped,
- `.` and `..` segments are folded.
"""

from __future__ import annotations

import posixpath
import re

_DRIVE_RE = re.compile(r"^/?[A-Za-z]:(?=/|$)")
_FILE_SCHEME_RE = re.compile(r"^file:", re.IGNORECASE)


def _strip_prefixes(path: str) -> str:
	path = path.replace("\\", "/")
	path = _FILE_SCHEME_RE.sub("", path)
	path = re.sub(r"/+", "/", path)
	return _DRIVE_RE.sub("", path)


def is_absolute(uri: str) -> bool:
	"""
	True for `/x`, `\\x`, `C:/x`, `C:\\x`, and `file:` URIs whose path is one of
	those. `file:x.fidl` is relative.
	"""
	rest = _FILE_SCHEME_RE.sub("", uri.replace("\\", "/"))
	return bool(_DRIVE_RE.match(rest)) or rest.startswith("/")


def normalize_path(path: str) -> str:
	"""
	Canonical `/`-separated spelling of `path` (see module docstring).

	Drive-only input (`C:`) normalizes to `/`.
	"""
	had_drive = bool(_DRIVE_RE.match(path.replace("\\", "/")))
	stripped = _strip_prefixes(path)
	if had_drive and not stripped.startswith("/"):
		stripped = "/" + stripped
	if not stripped:
		return "."
	return posixpath.normpath(stripped)


def resolve_import(uri: str, base_dir: str) -> str:
	"""
	Absolute identifier for an import URI declared in a file living in
	`base_dir`. Absolute URIs ignore `base_dir`.
	"""
	if is_absolute(uri):
		return normalize_path(uri)
	relative = _FILE_SCHEME_RE.sub("", uri)
	return normalize_path(base_dir.rstrip("/\\") + "/" + relative)


__all__ = ["is_absolute", "normalize_path", "resolve_import"]
