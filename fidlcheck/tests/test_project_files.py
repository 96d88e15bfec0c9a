# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from fidlcheck.loader import FileLoader
from fidlcheck.project import discover_fidl_files, load_project


def _write(path, text):
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")


def test_discover_skips_build_output(tmp_path):
	_write(tmp_path / "a.fidl", "package a\n")
	_write(tmp_path / "sub" / "b.fidl", "package b\n")
	_write(tmp_path / "bin" / "a.fidl", "package a\n")
	_write(tmp_path / "sub" / "bin" / "c.fidl", "package c\n")
	_write(tmp_path / "notes.txt", "package x\n")

	found = [p.relative_to(tmp_path.resolve()).as_posix() for p in discover_fidl_files(tmp_path)]
	assert found == ["a.fidl", "sub/b.fidl"]

	everything = discover_fidl_files(tmp_path, skip_dirs=())
	assert len(everything) == 4


def test_load_project_collects_failures(tmp_path):
	_write(tmp_path / "a.fidl", "package org.a\ntypeCollection T { }\n")
	_write(tmp_path / "broken.fidl", "package org.b\ninterface {\n")

	snapshot = load_project(tmp_path, FileLoader())
	assert [d.name for d in snapshot.documents] == ["org.a"]
	(failure,) = snapshot.failures
	assert failure.path.endswith("/broken.fidl")
	assert failure.reason.startswith("syntax error at ")
