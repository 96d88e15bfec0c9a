# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from fidlcheck.loader import FileLoader, InMemoryLoader, LoadFailure, call_loader
from fidlcheck.model import Document
from fidlcheck.test_support import doc


def test_file_loader_parses_and_caches(tmp_path):
	path = tmp_path / "a.fidl"
	path.write_text("package org.a\ntypeCollection T { }\n", encoding="utf-8")
	loader = FileLoader()

	first = loader.load(str(path))
	assert isinstance(first, Document)
	assert first.name == "org.a"
	assert first.digest is not None
	assert loader.load(str(path)) is first

	loader.clear()
	assert loader.load(str(path)) is not first


def test_file_loader_reloads_changed_file(tmp_path):
	path = tmp_path / "a.fidl"
	path.write_text("package org.a\n", encoding="utf-8")
	loader = FileLoader()
	first = loader.load(str(path))

	path.write_text("package org.changed\ntypeCollection T { }\n", encoding="utf-8")
	second = loader.load(str(path))
	assert second.name == "org.changed"
	assert second.digest != first.digest


def test_file_loader_failures(tmp_path):
	loader = FileLoader()
	missing = loader.load(str(tmp_path / "missing.fidl"))
	assert isinstance(missing, LoadFailure)

	bad = tmp_path / "bad.fidl"
	bad.write_text("package a\ninterface {\n", encoding="utf-8")
	result = loader.load(str(bad))
	assert isinstance(result, LoadFailure)
	assert result.reason.startswith("syntax error at ")

	latin = tmp_path / "latin.fidl"
	latin.write_bytes(b"package caf\xe9\n")
	decoded = loader.load(str(latin))
	assert isinstance(decoded, LoadFailure)
	assert "cannot decode" in decoded.reason


def test_in_memory_loader_add_remove():
	a = doc("org.a", "/p/a.fidl")
	loader = InMemoryLoader({"/p/a.fidl": a, "/p/b.fidl": "package org.b\n"})

	assert loader.load("/p/./a.fidl") is a
	assert [d.name for d in loader.documents()] == ["org.a", "org.b"]
	loader.remove("/p/a.fidl")
	assert isinstance(loader.load("/p/a.fidl"), LoadFailure)
	assert loader.requests == ["/p/a.fidl", "/p/a.fidl"]


def test_call_loader_coerces_junk():
	assert call_loader(lambda _p: None, "/x.fidl") == LoadFailure("/x.fidl", "file not found")
	assert call_loader(lambda _p: 42, "/x.fidl") == LoadFailure("/x.fidl", "loader returned int")

	def boom(_p):
		raise RuntimeError("nope")

	assert call_loader(boom, "/x.fidl") == LoadFailure("/x.fidl", "RuntimeError: nope")
