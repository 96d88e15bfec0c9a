# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from fidlcheck.config import CONFIG_FORMAT, CONFIG_VERSION
from fidlcheck.fidlcheck import main as fidlcheck_main


def _write_file(path: Path, text: str) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")


def _run_json(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict]:
	rc = fidlcheck_main([*argv, "--json"])
	out = capsys.readouterr().out
	payload = json.loads(out) if out.strip() else {}
	return rc, payload


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
	# Keep a stray ./fidlcheck.json out of the runs.
	monkeypatch.chdir(tmp_path)


def test_clean_file_exits_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = tmp_path / "a.fidl"
	_write_file(src, "package org.a\ntypeCollection T {\n\tenumeration E { A = 1 }\n}\n")

	rc, payload = _run_json([str(src)], capsys)
	assert rc == 0
	assert payload == {"exit_code": 0, "diagnostics": []}


def test_warnings_alone_exit_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = tmp_path / "a.fidl"
	_write_file(src, "package org.a\ntypeCollection T {\n\tenumeration E { A = 4a }\n}\n")

	rc, payload = _run_json([str(src)], capsys)
	assert rc == 0
	(diag,) = payload["diagnostics"]
	assert diag["severity"] == "warning"
	assert diag["message"] == "Not a valid number! Should be decimal"
	assert diag["element"] == "T.E.A.value"
	assert diag["line"] == 3
	assert diag["file"].endswith("/a.fidl")


def test_errors_exit_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	_write_file(tmp_path / "b.fidl", "package x.y.z\ntypeCollection Other { }\n")
	src = tmp_path / "a.fidl"
	_write_file(src, 'package x\nimport model "b.fidl"\ntypeCollection y { }\n')

	rc, payload = _run_json([str(src)], capsys)
	assert rc == 1
	assert payload["exit_code"] == 1
	messages = [d["message"] for d in payload["diagnostics"]]
	assert messages == ["Imported file's package x.y.z may not start with package x + typeCollection name y"]


def test_flags_override_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	_write_file(tmp_path / "b.fidl", "package x.y.z\ntypeCollection Other { }\n")
	src = tmp_path / "a.fidl"
	_write_file(src, 'package x\nimport model "b.fidl"\ntypeCollection y { }\n')

	rc, payload = _run_json([str(src), "--no-collision-check"], capsys)
	assert rc == 0
	assert payload["diagnostics"] == []


def test_whole_project_mode(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	_write_file(tmp_path / "other" / "stray.fidl", "package x.y\ntypeCollection T { }\n")
	_write_file(tmp_path / "bin" / "copy.fidl", "package x.y\ntypeCollection T { }\n")
	src = tmp_path / "a.fidl"
	_write_file(src, "package x\ninterface y { }\n")

	rc, payload = _run_json([str(src), "--whole-project", "--project-root", str(tmp_path)], capsys)
	assert rc == 0
	(diag,) = payload["diagnostics"]
	assert diag["severity"] == "warning"
	assert "stray.fidl. File's package x.y starts with package x + interface name y" in diag["message"]


def test_whole_project_needs_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = tmp_path / "a.fidl"
	_write_file(src, "package x\n")

	rc, payload = _run_json([str(src), "--whole-project"], capsys)
	assert rc == 2
	assert payload["diagnostics"][0]["phase"] == "config"


def test_config_file_and_prefix(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	_write_file(
		tmp_path / "fidlcheck.json",
		json.dumps({"format": CONFIG_FORMAT, "version": CONFIG_VERSION, "message_prefix": "DBus validation: "}),
	)
	src = tmp_path / "a.fidl"
	_write_file(src, "package org.a\ninterface Api {\n\tmethod go { in { UInt8 go } }\n}\n")

	rc, payload = _run_json([str(src)], capsys)
	assert rc == 1
	assert [d["message"] for d in payload["diagnostics"]] == ["DBus validation: Parameters cannot share name with method"]


def test_bad_config_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	cfg = tmp_path / "custom.json"
	_write_file(cfg, '{"format": "fidlcheck-config", "version": 9}')
	src = tmp_path / "a.fidl"
	_write_file(src, "package x\n")

	rc, payload = _run_json([str(src), "--config", str(cfg)], capsys)
	assert rc == 2
	assert payload["exit_code"] == 2
	assert payload["diagnostics"][0]["file"] == str(cfg)


def test_missing_source_is_an_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	rc, payload = _run_json([str(tmp_path / "nope.fidl")], capsys)
	assert rc == 1
	assert payload["diagnostics"][0]["message"].startswith("File could not be loaded:")


def test_human_output_goes_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = tmp_path / "a.fidl"
	_write_file(src, "package org.a\ninterface Api {\n\tmethod go { in { UInt8 go } }\n}\n")

	rc = fidlcheck_main([str(src)])
	captured = capsys.readouterr()
	assert rc == 1
	assert captured.out == ""
	assert ":3:" in captured.err
	assert "error: Parameters cannot share name with method" in captured.err
