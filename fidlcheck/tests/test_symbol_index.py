# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import replace

from fidlcheck.symbol_index import ProjectIndexCache, SymbolKind, build_index, qualify
from fidlcheck.test_support import doc, iface, tc


def _docs():
	return [
		doc("org.a", "/p/a.fidl", tc("Types"), iface("Api")),
		doc("org.b", "/p/b.fidl", tc("Types"), tc("")),
		doc("org.a", "/p/c.fidl", tc("Types")),
	]


def test_qualify():
	assert qualify("org.a", "Types") == "org.a.Types"
	assert qualify("", "Types") == "Types"


def test_build_index_keys_by_qualified_name_and_skips_anonymous():
	index = build_index(_docs())

	assert "org.a.Types" in index
	assert "org.b.Types" in index
	assert "org.b." not in index
	assert len(index) == 4
	assert index.files_declaring("org.a", "Types") == ["/p/a.fidl", "/p/c.fidl"]
	assert index.packages() == frozenset({"org.a", "org.b"})
	assert index.files() == frozenset({"/p/a.fidl", "/p/b.fidl", "/p/c.fidl"})

	(api,) = index.lookup("org.a.Api")
	assert api.kind is SymbolKind.INTERFACE
	assert api.is_interface
	assert index.lookup("org.missing.X") == frozenset()


def test_index_order_is_deterministic():
	forward = build_index(_docs())
	backward = build_index(list(reversed(_docs())))

	assert forward == backward
	assert [(e.qualified_name, e.file) for e in forward] == [
		("org.a.Api", "/p/a.fidl"),
		("org.a.Types", "/p/a.fidl"),
		("org.a.Types", "/p/c.fidl"),
		("org.b.Types", "/p/b.fidl"),
	]


def test_file_packages_cover_files_without_named_elements():
	index = build_index([*_docs(), doc("org.a.z", "/p/anon.fidl", tc("")), doc("org.0", "/p/empty.fidl")])

	assert index.file_packages() == (
		("/p/empty.fidl", "org.0"),
		("/p/a.fidl", "org.a"),
		("/p/c.fidl", "org.a"),
		("/p/anon.fidl", "org.a.z"),
		("/p/b.fidl", "org.b"),
	)
	assert "org.a.z" in index.packages()
	assert len(index) == 4


def test_project_cache_reuses_index_while_documents_are_unchanged():
	docs = [replace(d, digest=f"d{i}") for i, d in enumerate(_docs())]
	cache = ProjectIndexCache()
	assert not cache.is_built

	first = cache.get(docs)
	second = cache.get(list(reversed(docs)))
	assert first is second
	assert cache.builds == 1
	assert cache.is_built


def test_project_cache_rebuilds_when_a_document_changes():
	docs = [replace(d, digest=f"d{i}") for i, d in enumerate(_docs())]
	cache = ProjectIndexCache()
	first = cache.get(docs)

	edited = replace(docs[2], name="org.c", digest="edited")
	second = cache.get(docs[:2] + [edited])
	assert cache.builds == 2
	assert "org.c.Types" in second
	assert second != first


def test_project_cache_rebuilds_after_invalidate():
	docs = _docs()
	cache = ProjectIndexCache()
	first = cache.get(docs)
	cache.invalidate()
	assert not cache.is_built

	second = cache.get(docs)
	assert cache.builds == 2
	assert second == first
	assert second is not first
