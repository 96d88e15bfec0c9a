# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
fidlcheck command line driver.

Validates one or more `.fidl` files before code generation. Exit codes:
  0  no error diagnostics (warnings allowed)
  1  at least one error diagnostic
  2  configuration problem (bad config file, missing project root)

With --json, prints {"exit_code": N, "diagnostics": [...]} on stdout, each
diagnostic carrying phase/message/severity/file/line/column/element/notes.
Otherwise prints `file:line:col: severity: message` lines (plus indented
notes) on stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from fidlcheck.config import DEFAULT_CONFIG_NAME, ConfigError, ValidatorConfig, load_config_json
from fidlcheck.core.diagnostics import Diagnostic
from fidlcheck.engine import validate_path
from fidlcheck.loader import FileLoader
from fidlcheck.project import load_project
from fidlcheck.symbol_index import ProjectIndexCache

logger = logging.getLogger(__name__)


def _diag_to_json(diag: Diagnostic) -> Dict[str, Any]:
	return {
		"phase": "validate",
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file or diag.element.document,
		"line": diag.span.line,
		"column": diag.span.column,
		"element": diag.element.describe(),
		"notes": list(diag.notes),
	}


def _format_human(diag: Diagnostic) -> str:
	file = diag.span.file or diag.element.document
	line = "?" if diag.span.line is None else diag.span.line
	column = "?" if diag.span.column is None else diag.span.column
	return f"{file}:{line}:{column}: {diag.severity}: {diag.message}"


def _fail_config(message: str, *, as_json: bool, file: Optional[str] = None) -> int:
	if as_json:
		print(
			json.dumps(
				{
					"exit_code": 2,
					"diagnostics": [
						{
							"phase": "config",
							"message": message,
							"severity": "error",
							"file": file,
							"line": None,
							"column": None,
							"element": None,
							"notes": [],
						}
					],
				}
			)
		)
	else:
		print(f"{file or '<config>'}:?:?: error: {message}", file=sys.stderr)
	return 2


def _resolve_config(args: argparse.Namespace) -> ValidatorConfig:
	config = ValidatorConfig()
	config_path: Optional[Path] = args.config
	if config_path is None:
		candidate = Path.cwd() / DEFAULT_CONFIG_NAME
		if candidate.exists():
			config_path = candidate
	if config_path is not None:
		config = load_config_json(config_path)
	return config.with_overrides(
		whole_project=True if args.whole_project else None,
		package_collision_check=False if args.no_collision_check else None,
		message_prefix=args.message_prefix,
	)


def main(argv: list[str] | None = None) -> int:
	"""Parse arguments, validate every source file, report, return the exit code."""
	parser = argparse.ArgumentParser(prog="fidlcheck", description="Validate Franca IDL files before code generation")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to .fidl file(s) to validate")
	parser.add_argument("--config", type=Path, help=f"Path to config JSON (default: ./{DEFAULT_CONFIG_NAME} if present)")
	parser.add_argument(
		"--project-root",
		type=Path,
		help="Project root directory; every .fidl file below it is indexed in whole-project mode",
	)
	parser.add_argument(
		"--whole-project",
		action="store_true",
		help="Check collisions against every project file, not only imported ones (needs --project-root)",
	)
	parser.add_argument("--no-collision-check", action="store_true", help="Disable package/name collision checks")
	parser.add_argument("--message-prefix", default=None, help="Prefix prepended to every diagnostic message")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column/element/notes)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log closure/index activity to stderr")
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
	)

	try:
		config = _resolve_config(args)
	except ConfigError as err:
		return _fail_config(str(err), as_json=args.json, file=str(args.config) if args.config else None)

	loader = FileLoader()
	project_documents = None
	if config.whole_project:
		if args.project_root is None:
			return _fail_config("--whole-project requires --project-root", as_json=args.json)
		if not args.project_root.is_dir():
			return _fail_config(f"project root is not a directory: {args.project_root}", as_json=args.json)
		snapshot = load_project(args.project_root, loader, skip_dirs=config.skip_dirs)
		for failure in snapshot.failures:
			logger.warning("project file %s not indexed: %s", failure.path, failure.reason)
		project_documents = list(snapshot.documents)

	# One cache per invocation: every source shares the project index.
	cache = ProjectIndexCache()
	diagnostics: List[Diagnostic] = []
	for source in args.source:
		result = validate_path(
			str(source.resolve()),
			loader,
			config=config,
			project_documents=project_documents,
			index_cache=cache,
		)
		diagnostics.extend(result.diagnostics)

	exit_code = 1 if any(d.is_error for d in diagnostics) else 0
	if args.json:
		print(json.dumps({"exit_code": exit_code, "diagnostics": [_diag_to_json(d) for d in diagnostics]}))
	else:
		for diag in diagnostics:
			print(_format_human(diag), file=sys.stderr)
			for note in diag.notes:
				print(f"  note: {note}", file=sys.stderr)
	return exit_code


if __name__ == "__main__":
	sys.exit(main())
