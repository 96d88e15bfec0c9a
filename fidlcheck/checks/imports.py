# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Imports that failed to load.

A failed direct import of the root is an error at the import itself. A
failure deeper in the closure is only a warning on the root: the file that
actually declares the broken import gets the error when it is validated.
"""

from __future__ import annotations

from typing import List

from fidlcheck.checks import make_diagnostic
from fidlcheck.core.diagnostics import ERROR, WARNING, Diagnostic
from fidlcheck.imports import ClosureResult
from fidlcheck.model import Document


def check_imports(document: Document, closure: ClosureResult) -> List[Diagnostic]:
	out: List[Diagnostic] = []
	for edge in closure.failed_edges:
		if edge.importer == closure.root:
			imp = document.imports[edge.index]
			message = f"Imported file {edge.target} could not be loaded: {edge.reason}"
			out.append(make_diagnostic(ERROR, message, document, "", "imports", edge.index, span=imp.span))
		else:
			message = f"File {edge.target} imported via {edge.importer} could not be loaded: {edge.reason}"
			out.append(make_diagnostic(WARNING, message, document, "", "imports"))
	return out


__all__ = ["check_imports"]
