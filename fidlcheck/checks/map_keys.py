# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Map key type check.

Generated bindings use map keys as dictionary keys, so the key type must end
up, after following typedef aliases, at a primitive or an enumeration.
"""

from __future__ import annotations

from typing import List, Optional

from fidlcheck.checks import make_diagnostic
from fidlcheck.core.diagnostics import ERROR, Diagnostic
from fidlcheck.model import (
	ArrayType,
	Document,
	EnumerationType,
	MapType,
	StructType,
	TypeCollection,
	TypeDef,
	UnionType,
	type_kind,
)
from fidlcheck.type_resolver import TypeResolver

KEY_TYPE_MESSAGE = "Key type has to be a primitive type"


def check_map_key(
	map_type: MapType,
	*,
	document: Document,
	element: TypeCollection,
	resolver: TypeResolver,
) -> Optional[Diagnostic]:
	"""
	Diagnostic for an unacceptable key type, or None.

	Cycles reachable from the map (through its key or its value) are left to
	the type cycle check; this check stays silent for them. An unresolvable
	key reference is left to the type reference check as well.
	"""
	key = map_type.key_type
	if key.is_primitive:
		return None
	if resolver.has_cycle(resolver.owner_of(document, element, map_type)):
		return None
	target = resolver.resolve(key, document, element)
	if target is None:
		return None

	while True:
		decl = target.decl
		if isinstance(decl, EnumerationType):
			return None
		if isinstance(decl, TypeDef):
			actual = decl.actual_type
			if actual.is_primitive:
				return None
			nxt = resolver.resolve(actual, target.document, target.element)
			if nxt is None:
				return None
			target = nxt
			continue
		if isinstance(decl, (StructType, UnionType, MapType, ArrayType)):
			break
		raise TypeError(f"unhandled type declaration {type(decl).__name__}")

	path = f"{element.name}.{map_type.name}" if element.name else map_type.name
	note = f"key type '{key.display()}' resolves to {type_kind(target.decl)} {target.fqn}"
	return make_diagnostic(
		ERROR,
		KEY_TYPE_MESSAGE,
		document,
		path,
		"keyType",
		span=map_type.key_type.span,
		notes=(note,),
	)


def check_map_keys(document: Document, resolver: TypeResolver) -> List[Diagnostic]:
	out: List[Diagnostic] = []
	for element in document.elements():
		for decl in element.types:
			if isinstance(decl, MapType):
				diag = check_map_key(decl, document=document, element=element, resolver=resolver)
				if diag is not None:
					out.append(diag)
	return out


__all__ = ["KEY_TYPE_MESSAGE", "check_map_key", "check_map_keys"]
