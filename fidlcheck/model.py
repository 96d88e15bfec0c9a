# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Immutable document model for parsed Franca IDL files.

Everything here is produced by a loader and never mutated by the validators.
Collections are tuples so documents can be shared freely between runs.

Type declarations form a closed set (`TypeDecl`). Code that dispatches on a
declaration must handle every member and raise `TypeError` on anything else,
so adding a variant shows up as a failure in every dispatch site.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union

from fidlcheck.core.span import Span

PACKAGE_SEPARATOR = "."

# Franca basic type ids. `undefined` marks a reference to a user type.
UNDEFINED = "undefined"
PRIMITIVE_TYPES = frozenset(
	{
		"Int8",
		"UInt8",
		"Int16",
		"UInt16",
		"Int32",
		"UInt32",
		"Int64",
		"UInt64",
		"Boolean",
		"Float",
		"Double",
		"String",
		"ByteBuffer",
	}
)


@dataclass(frozen=True)
class TypeRef:
	"""
	Reference to a type: either a primitive (`predefined`) or a user type by
	name (`derived`, possibly qualified like `Types.Color`).
	"""

	predefined: str = UNDEFINED
	derived: Optional[str] = None
	span: Span = field(default_factory=Span)

	@property
	def is_primitive(self) -> bool:
		return self.predefined != UNDEFINED

	def display(self) -> str:
		return self.predefined if self.is_primitive else (self.derived or "?")


@dataclass(frozen=True)
class Enumerator:
	name: str
	value: Optional[str] = None  # raw literal text, None when absent
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class EnumerationType:
	name: str
	enumerators: Tuple[Enumerator, ...] = ()
	base: Optional[TypeRef] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class MapType:
	name: str
	key_type: TypeRef
	value_type: TypeRef
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class TypeDef:
	"""Alias: `typedef name is actual_type`."""

	name: str
	actual_type: TypeRef
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Field:
	name: str
	type: TypeRef
	is_array: bool = False
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class StructType:
	name: str
	fields: Tuple[Field, ...] = ()
	base: Optional[TypeRef] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class UnionType:
	name: str
	fields: Tuple[Field, ...] = ()
	base: Optional[TypeRef] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class ArrayType:
	name: str
	element_type: TypeRef
	span: Span = field(default_factory=Span)


TypeDecl = Union[EnumerationType, MapType, TypeDef, StructType, UnionType, ArrayType]


def type_kind(decl: TypeDecl) -> str:
	"""Franca keyword for a declaration (used in messages)."""
	if isinstance(decl, EnumerationType):
		return "enumeration"
	if isinstance(decl, MapType):
		return "map"
	if isinstance(decl, TypeDef):
		return "typedef"
	if isinstance(decl, StructType):
		return "struct"
	if isinstance(decl, UnionType):
		return "union"
	if isinstance(decl, ArrayType):
		return "array"
	raise TypeError(f"unhandled type declaration {type(decl).__name__}")


def referenced_types(decl: TypeDecl) -> Iterator[TypeRef]:
	"""Every TypeRef a declaration points at, in declaration order."""
	if isinstance(decl, EnumerationType):
		if decl.base is not None:
			yield decl.base
	elif isinstance(decl, MapType):
		yield decl.key_type
		yield decl.value_type
	elif isinstance(decl, TypeDef):
		yield decl.actual_type
	elif isinstance(decl, (StructType, UnionType)):
		if decl.base is not None:
			yield decl.base
		for fld in decl.fields:
			yield fld.type
	elif isinstance(decl, ArrayType):
		yield decl.element_type
	else:
		raise TypeError(f"unhandled type declaration {type(decl).__name__}")


@dataclass(frozen=True)
class Argument:
	name: str
	type: TypeRef
	is_array: bool = False
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Method:
	name: str
	in_args: Tuple[Argument, ...] = ()
	out_args: Tuple[Argument, ...] = ()
	fire_and_forget: bool = False
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Attribute:
	name: str
	type: TypeRef
	is_array: bool = False
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Broadcast:
	name: str
	out_args: Tuple[Argument, ...] = ()
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class TypeCollection:
	"""Named group of type declarations. The name is empty for anonymous ones."""

	name: str
	types: Tuple[TypeDecl, ...] = ()
	version: Optional[Tuple[int, int]] = None
	span: Span = field(default_factory=Span)

	kind = "typeCollection"

	def find_type(self, name: str) -> Optional[TypeDecl]:
		for decl in self.types:
			if decl.name == name:
				return decl
		return None


@dataclass(frozen=True)
class Interface(TypeCollection):
	"""A type collection that additionally declares methods."""

	methods: Tuple[Method, ...] = ()
	attributes: Tuple[Attribute, ...] = ()
	broadcasts: Tuple[Broadcast, ...] = ()
	base: Optional[str] = None
	managed: Tuple[str, ...] = ()

	kind = "interface"


@dataclass(frozen=True)
class Import:
	"""
	`import model "uri"` or `import ns.* from "uri"`.

	`uri` is kept verbatim; normalization happens during closure resolution.
	"""

	uri: str
	namespace: Optional[str] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Document:
	"""One parsed `.fidl` file."""

	name: str
	source_path: str
	imports: Tuple[Import, ...] = ()
	type_collections: Tuple[TypeCollection, ...] = ()
	interfaces: Tuple[Interface, ...] = ()
	digest: Optional[str] = None
	span: Span = field(default_factory=Span)

	def elements(self) -> Iterator[TypeCollection]:
		"""Type collections first, then interfaces (declaration order within each)."""
		yield from self.type_collections
		yield from self.interfaces

	@property
	def directory(self) -> str:
		head, _sep, _tail = self.source_path.rpartition("/")
		return head or "/"


__all__ = [
	"PACKAGE_SEPARATOR",
	"UNDEFINED",
	"PRIMITIVE_TYPES",
	"TypeRef",
	"Enumerator",
	"EnumerationType",
	"MapType",
	"TypeDef",
	"Field",
	"StructType",
	"UnionType",
	"ArrayType",
	"TypeDecl",
	"type_kind",
	"referenced_types",
	"Argument",
	"Method",
	"Attribute",
	"Broadcast",
	"TypeCollection",
	"Interface",
	"Import",
	"Document",
]
