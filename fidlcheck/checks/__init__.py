# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structural validators.

Each validator is a plain function that inspects part of the root document
and returns the diagnostics it found; none of them raise for bad input or
stop a run. The engine calls them in a fixed order and streams the results
into a sink.

Modules:
  - names: element names vs. package separator and package collisions
  - map_keys: map key types must resolve to a primitive or an enumeration
  - type_cycles: type definition cycles and unresolved type references
  - enum_literals: enumerator value literal format
  - method_args: arguments named like their method
  - imports: imports that failed to load
"""

from __future__ import annotations

from typing import Optional, Tuple

from fidlcheck.core.diagnostics import Diagnostic, ElementRef
from fidlcheck.core.span import Span
from fidlcheck.model import Document


def make_diagnostic(
	severity: str,
	message: str,
	document: Document,
	element: str,
	feature: Optional[str] = None,
	index: Optional[int] = None,
	span: Optional[Span] = None,
	*,
	code: Optional[str] = None,
	notes: Tuple[str, ...] = (),
) -> Diagnostic:
	"""Diagnostic anchored at `element` (dotted path) of `document`."""
	ref = ElementRef(document=document.source_path, element=element, feature=feature, index=index)
	if span is None or span.file is None:
		span = (span or Span()).with_file(document.source_path)
	return Diagnostic(severity=severity, message=message, element=ref, span=span, code=code, notes=notes)


__all__ = ["make_diagnostic"]
