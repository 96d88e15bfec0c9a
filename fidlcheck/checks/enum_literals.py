# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Enumerator value literal check.

Values are copied verbatim into generated code, so they have to be a valid
integer literal in the base their prefix announces: `0b` binary, `0x`
hexadecimal, a leading `0` octal, decimal otherwise. The first failing rule
produces the only warning for a literal.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from fidlcheck.checks import make_diagnostic
from fidlcheck.core.diagnostics import WARNING, Diagnostic
from fidlcheck.model import Document, EnumerationType

_DEC = frozenset("0123456789")
_BIN = frozenset("01")
_OCT = frozenset("01234567")
_HEX = frozenset("0123456789abcdef")


def check_enum_literal(value_text: str) -> Optional[Tuple[str, str]]:
	"""(severity, message) for a malformed literal, None for a valid one."""
	value = value_text.lower()
	if not value:
		return WARNING, "Missing value!"
	if len(value) == 1:
		if value not in _DEC:
			return WARNING, "Not a valid number!"
		return None
	if len(value) > 2 and value.startswith("0b"):
		if not set(value[2:]) <= _BIN:
			return WARNING, "Not a valid number! Should be binary"
		return None
	if len(value) > 2 and value.startswith("0x"):
		if not set(value[2:]) <= _HEX:
			return WARNING, "Not a valid number! Should be hexadecimal"
		return None
	if value.startswith("0"):
		if not set(value[1:]) <= _OCT:
			return WARNING, "Not a valid number! Should be octal"
		return None
	if not set(value) <= _DEC:
		return WARNING, "Not a valid number! Should be decimal"
	return None


def check_enumerators(document: Document) -> List[Diagnostic]:
	out: List[Diagnostic] = []
	for element in document.elements():
		for decl in element.types:
			if not isinstance(decl, EnumerationType):
				continue
			for enumerator in decl.enumerators:
				if enumerator.value is None:
					continue
				found = check_enum_literal(enumerator.value)
				if found is None:
					continue
				severity, message = found
				path = ".".join(p for p in (element.name, decl.name, enumerator.name) if p)
				out.append(make_diagnostic(severity, message, document, path, "value", span=enumerator.span))
	return out


__all__ = ["check_enum_literal", "check_enumerators"]
