# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lark-based parser for the Franca IDL subset in `grammar.lark`.

The parse tree is walked by small `_build_*` helpers (one per grammar rule)
that produce the immutable `fidlcheck.model` dataclasses. Grammar errors
surface as lark `UnexpectedInput`; structural problems the grammar cannot
express (bad version numbers, duplicate anonymous collections) raise
`FidlSyntaxError`. The loader turns both into a `LoadFailure`.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree

from fidlcheck.core.span import Span
from fidlcheck.model import (
	PRIMITIVE_TYPES,
	Argument,
	ArrayType,
	Attribute,
	Broadcast,
	Document,
	EnumerationType,
	Enumerator,
	Field,
	Import,
	Interface,
	MapType,
	Method,
	StructType,
	TypeCollection,
	TypeDecl,
	TypeDef,
	TypeRef,
	UnionType,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


class FidlSyntaxError(ValueError):
	"""
	User-facing error for input the grammar accepts but the model cannot
	represent.
	"""

	def __init__(self, message: str, *, loc: Span | None) -> None:
		super().__init__(message)
		self.loc = loc


def parse_fidl(source: str, *, source_path: str = "<memory>", digest: str | None = None) -> Document:
	"""Parse `.fidl` source text into a Document."""
	tree = _PARSER.parse(source)
	return _Builder(source_path).build_document(tree, digest)


class _Builder:
	"""Per-file tree walker; carries the file path into every Span."""

	def __init__(self, source_path: str) -> None:
		self.file = source_path

	def _loc(self, node: Tree | Token) -> Span:
		if isinstance(node, Token):
			return Span(
				file=self.file,
				line=node.line,
				column=node.column,
				end_line=node.end_line,
				end_column=node.end_column,
			)
		return Span.from_meta(node.meta, self.file)

	def build_document(self, tree: Tree, digest: str | None) -> Document:
		package = ""
		package_span = Span(file=self.file)
		imports: List[Import] = []
		collections: List[TypeCollection] = []
		interfaces: List[Interface] = []
		for child in tree.children:
			if not isinstance(child, Tree):
				continue
			kind = _name(child)
			if kind == "package_decl":
				package = _fqn(_child(child, "fqn"))
				package_span = self._loc(child)
			elif kind in {"import_namespace", "import_model"}:
				imports.append(self._build_import(child))
			elif kind == "type_collection":
				collections.append(self._build_type_collection(child))
			elif kind == "interface":
				interfaces.append(self._build_interface(child))
			else:
				raise ValueError(f"unexpected top-level node: {kind}")
		anonymous = [tc for tc in collections if not tc.name]
		if len(anonymous) > 1:
			raise FidlSyntaxError("at most one anonymous typeCollection per file", loc=anonymous[1].span)
		return Document(
			name=package,
			source_path=self.file,
			imports=tuple(imports),
			type_collections=tuple(collections),
			interfaces=tuple(interfaces),
			digest=digest,
			span=package_span,
		)

	def _build_import(self, tree: Tree) -> Import:
		uri_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "STRING")
		namespace = None
		ns_node = _child(tree, "import_ns", required=False)
		if ns_node is not None:
			namespace = _fqn(_child(ns_node, "fqn"))
			if any(isinstance(c, Token) and c.type == "WILDCARD" for c in ns_node.children):
				namespace += ".*"
		return Import(uri=_decode_string(uri_tok), namespace=namespace, span=self._loc(tree))

	def _build_version(self, tree: Tree | None) -> Optional[tuple[int, int]]:
		if tree is None:
			return None
		nums = [c for c in tree.children if isinstance(c, Token) and c.type == "NUMBER"]
		try:
			return int(nums[0].value), int(nums[1].value)
		except ValueError:
			raise FidlSyntaxError("version numbers must be decimal integers", loc=self._loc(tree)) from None

	def _build_type_collection(self, tree: Tree) -> TypeCollection:
		name_tok = _token(tree, "NAME", required=False)
		types = tuple(self._build_type_def(c) for c in tree.children if isinstance(c, Tree) and _name(c) in _TYPE_RULES)
		return TypeCollection(
			name=name_tok.value if name_tok is not None else "",
			types=types,
			version=self._build_version(_child(tree, "version", required=False)),
			span=self._loc(name_tok) if name_tok is not None else self._loc(tree),
		)

	def _build_interface(self, tree: Tree) -> Interface:
		name_tok = _token(tree, "NAME")
		types: List[TypeDecl] = []
		methods: List[Method] = []
		attributes: List[Attribute] = []
		broadcasts: List[Broadcast] = []
		base = None
		managed: tuple[str, ...] = ()
		for child in tree.children:
			if not isinstance(child, Tree):
				continue
			kind = _name(child)
			if kind == "extends_clause":
				base = _fqn(_child(child, "fqn"))
			elif kind == "manages_clause":
				managed = tuple(_fqn(c) for c in child.children if isinstance(c, Tree))
			elif kind == "method":
				methods.append(self._build_method(child))
			elif kind == "attribute":
				attributes.append(self._build_attribute(child))
			elif kind == "broadcast":
				broadcasts.append(self._build_broadcast(child))
			elif kind in _TYPE_RULES:
				types.append(self._build_type_def(child))
		return Interface(
			name=name_tok.value,
			types=tuple(types),
			version=self._build_version(_child(tree, "version", required=False)),
			span=self._loc(name_tok),
			methods=tuple(methods),
			attributes=tuple(attributes),
			broadcasts=tuple(broadcasts),
			base=base,
			managed=managed,
		)

	def _build_method(self, tree: Tree) -> Method:
		name_tok = _token(tree, "NAME")
		in_node = _child(tree, "in_args", required=False)
		out_node = _child(tree, "out_args", required=False)
		return Method(
			name=name_tok.value,
			in_args=self._build_arguments(in_node),
			out_args=self._build_arguments(out_node),
			fire_and_forget=_token(tree, "FIRE_AND_FORGET", required=False) is not None,
			span=self._loc(name_tok),
		)

	def _build_broadcast(self, tree: Tree) -> Broadcast:
		name_tok = _token(tree, "NAME")
		return Broadcast(
			name=name_tok.value,
			out_args=self._build_arguments(_child(tree, "out_args", required=False)),
			span=self._loc(name_tok),
		)

	def _build_arguments(self, tree: Tree | None) -> tuple[Argument, ...]:
		if tree is None:
			return ()
		out: List[Argument] = []
		for arg in tree.children:
			if not isinstance(arg, Tree):
				continue
			name_tok = _token(arg, "NAME")
			out.append(
				Argument(
					name=name_tok.value,
					type=self._build_type_ref(_child(arg, "type_ref")),
					is_array=_token(arg, "ARRAY_SUFFIX", required=False) is not None,
					span=self._loc(name_tok),
				)
			)
		return tuple(out)

	def _build_attribute(self, tree: Tree) -> Attribute:
		name_tok = _token(tree, "NAME")
		return Attribute(
			name=name_tok.value,
			type=self._build_type_ref(_child(tree, "type_ref")),
			is_array=_token(tree, "ARRAY_SUFFIX", required=False) is not None,
			span=self._loc(name_tok),
		)

	def _build_type_ref(self, tree: Tree) -> TypeRef:
		name = _fqn(_child(tree, "fqn"))
		if name in PRIMITIVE_TYPES:
			return TypeRef(predefined=name, span=self._loc(tree))
		return TypeRef(derived=name, span=self._loc(tree))

	def _extends(self, tree: Tree) -> Optional[TypeRef]:
		node = _child(tree, "extends_clause", required=False)
		if node is None:
			return None
		fqn_node = _child(node, "fqn")
		return TypeRef(derived=_fqn(fqn_node), span=self._loc(fqn_node))

	def _build_type_def(self, tree: Tree) -> TypeDecl:
		kind = _name(tree)
		name_tok = _token(tree, "NAME")
		span = self._loc(name_tok)
		refs = [self._build_type_ref(c) for c in tree.children if isinstance(c, Tree) and _name(c) == "type_ref"]
		if kind == "enum_def":
			enumerators = tuple(
				self._build_enumerator(c) for c in tree.children if isinstance(c, Tree) and _name(c) == "enumerator"
			)
			return EnumerationType(name=name_tok.value, enumerators=enumerators, base=self._extends(tree), span=span)
		if kind == "map_def":
			return MapType(name=name_tok.value, key_type=refs[0], value_type=refs[1], span=span)
		if kind == "typedef_def":
			return TypeDef(name=name_tok.value, actual_type=refs[0], span=span)
		if kind == "array_def":
			return ArrayType(name=name_tok.value, element_type=refs[0], span=span)
		if kind in {"struct_def", "union_def"}:
			fields = tuple(self._build_field(c) for c in tree.children if isinstance(c, Tree) and _name(c) == "field")
			cls = StructType if kind == "struct_def" else UnionType
			return cls(name=name_tok.value, fields=fields, base=self._extends(tree), span=span)
		raise ValueError(f"unexpected type definition node: {kind}")

	def _build_enumerator(self, tree: Tree) -> Enumerator:
		name_tok = _token(tree, "NAME")
		value_node = _child(tree, "enum_value", required=False)
		value = None
		if value_node is not None:
			inner = value_node.children[0]
			if isinstance(inner, Token) and inner.type == "STRING":
				value = _decode_string(inner)
			elif isinstance(inner, Token):
				value = inner.value
			else:
				value = _fqn(inner)
		return Enumerator(name=name_tok.value, value=value, span=self._loc(name_tok))

	def _build_field(self, tree: Tree) -> Field:
		name_tok = _token(tree, "NAME")
		return Field(
			name=name_tok.value,
			type=self._build_type_ref(_child(tree, "type_ref")),
			is_array=_token(tree, "ARRAY_SUFFIX", required=False) is not None,
			span=self._loc(name_tok),
		)


_TYPE_RULES = frozenset({"enum_def", "map_def", "typedef_def", "struct_def", "union_def", "array_def"})


def _decode_string(tok: Token) -> str:
	# Franca strings carry paths and literal text; only `\"` and `\\` are escapes.
	return tok.value[1:-1].replace('\\"', '"').replace("\\\\", "\\")


def _fqn(tree: Tree) -> str:
	return ".".join(c.value for c in tree.children if isinstance(c, Token) and c.type == "NAME")


def _child(tree: Tree, name: str, *, required: bool = True) -> Tree | None:
	for c in tree.children:
		if isinstance(c, Tree) and _name(c) == name:
			return c
	if required:
		raise ValueError(f"{_name(tree)} node missing {name}")
	return None


def _token(tree: Tree, type_name: str, *, required: bool = True) -> Token | None:
	"""First direct Token child of the given type (e.g. the declared NAME)."""
	for c in tree.children:
		if isinstance(c, Token) and c.type == type_name:
			return c
	if required:
		raise ValueError(f"{_name(tree)} node missing {type_name} token")
	return None


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["FidlSyntaxError", "parse_fidl"]
