# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared builders for tests that need documents without going through the
parser.

They keep test data short: `prim("UInt8")`, `ref("Color")`,
`enum("Color", ("RED", "1"))`, `tc("Types", ...)`, `doc("a.b", "/p/a.fidl",
...)`.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from fidlcheck.model import (
	Argument,
	Document,
	EnumerationType,
	Enumerator,
	Field,
	Import,
	Interface,
	Method,
	StructType,
	TypeCollection,
	TypeDecl,
	TypeRef,
)


def prim(name: str) -> TypeRef:
	return TypeRef(predefined=name)


def ref(name: str) -> TypeRef:
	return TypeRef(derived=name)


def enum(name: str, *enumerators: Tuple[str, Optional[str]]) -> EnumerationType:
	return EnumerationType(name=name, enumerators=tuple(Enumerator(n, v) for n, v in enumerators))


def struct(name: str, *fields: Tuple[TypeRef, str]) -> StructType:
	return StructType(name=name, fields=tuple(Field(name=n, type=t) for t, n in fields))


def tc(name: str, *types: TypeDecl) -> TypeCollection:
	return TypeCollection(name=name, types=tuple(types))


def method(name: str, in_args: Sequence[Tuple[TypeRef, str]] = (), out_args: Sequence[Tuple[TypeRef, str]] = ()) -> Method:
	return Method(
		name=name,
		in_args=tuple(Argument(name=n, type=t) for t, n in in_args),
		out_args=tuple(Argument(name=n, type=t) for t, n in out_args),
	)


def iface(name: str, *methods: Method, types: Iterable[TypeDecl] = (), base: Optional[str] = None) -> Interface:
	return Interface(name=name, types=tuple(types), methods=tuple(methods), base=base)


def doc(
	package: str,
	path: str,
	*elements: TypeCollection,
	imports: Iterable[str] = (),
) -> Document:
	"""Document with `elements` split into type collections and interfaces."""
	return Document(
		name=package,
		source_path=path,
		imports=tuple(Import(uri=u) for u in imports),
		type_collections=tuple(e for e in elements if not isinstance(e, Interface)),
		interfaces=tuple(e for e in elements if isinstance(e, Interface)),
	)


__all__ = ["prim", "ref", "enum", "struct", "tc", "method", "iface", "doc"]
