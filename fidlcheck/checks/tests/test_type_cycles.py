# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from fidlcheck.checks.type_cycles import check_type_cycles, check_type_references
from fidlcheck.core.diagnostics import ERROR
from fidlcheck.model import Field, StructType, TypeDef
from fidlcheck.test_support import doc, iface, method, prim, ref, struct, tc
from fidlcheck.type_resolver import TypeResolver


def _cycles(document, *others):
	return check_type_cycles(document, TypeResolver([document, *others]))


def test_typedef_cycle_reported_once_at_first_member():
	root = doc(
		"org.a",
		"/p/a.fidl",
		tc(
			"T",
			TypeDef(name="A", actual_type=ref("B")),
			TypeDef(name="B", actual_type=ref("A")),
		),
	)
	(diag,) = _cycles(root)

	assert diag.severity == ERROR
	assert diag.message == "Type definition cycle: org.a.T.A -> org.a.T.B -> org.a.T.A"
	assert diag.element.element == "T.A"


def test_self_containing_struct_is_a_cycle():
	node = StructType(name="Node", fields=(Field(name="next", type=ref("Node")),))
	root = doc("org.a", "/p/a.fidl", tc("", node))
	(diag,) = _cycles(root)

	assert diag.message == "Type definition cycle: org.a.Node -> org.a.Node"
	assert diag.element.element == "Node"


def test_acyclic_types_are_silent():
	root = doc(
		"org.a",
		"/p/a.fidl",
		tc(
			"T",
			struct("Point", (prim("Int32"), "x")),
			struct("Line", (ref("Point"), "a"), (ref("Point"), "b")),
			TypeDef(name="Segment", actual_type=ref("Line")),
		),
	)
	assert _cycles(root) == []


def test_cycle_entirely_in_imported_file_is_not_reported_on_root():
	other = doc(
		"org.b",
		"/p/b.fidl",
		tc(
			"U",
			TypeDef(name="X", actual_type=ref("Y")),
			TypeDef(name="Y", actual_type=ref("X")),
		),
	)
	root = doc("org.a", "/p/a.fidl", tc("T", TypeDef(name="Z", actual_type=ref("org.b.U.X"))), imports=["b.fidl"])
	assert _cycles(root, other) == []


def test_unresolved_references_in_types_and_arguments():
	root = doc(
		"org.a",
		"/p/a.fidl",
		tc("T", struct("S", (ref("Missing"), "m"), (prim("UInt8"), "ok"))),
		iface("Api", method("call", in_args=[(ref("Gone"), "arg"), (ref("T.S"), "s")])),
	)
	diags = check_type_references(root, TypeResolver([root]))

	assert [(d.message, d.element.element) for d in diags] == [
		("Unresolved type reference 'Missing'", "T.S"),
		("Unresolved type reference 'Gone'", "Api.call.arg"),
	]


def test_interface_types_resolve_through_base_interface():
	base = iface("Base", types=[struct("Shared")])
	derived = iface("Derived", method("m", in_args=[(ref("Shared"), "s")]), base="Base")
	root = doc("org.a", "/p/a.fidl", base, derived)

	assert check_type_references(root, TypeResolver([root])) == []


def _alias_chain(length, last):
	aliases = [TypeDef(name=f"T{i}", actual_type=ref(f"T{i + 1}")) for i in range(length - 1)]
	aliases.append(TypeDef(name=f"T{length - 1}", actual_type=last))
	return doc("org.a", "/p/a.fidl", tc("T", *aliases))


def test_long_acyclic_alias_chain_is_silent():
	root = _alias_chain(3000, prim("UInt8"))
	resolver = TypeResolver([root])

	assert check_type_cycles(root, resolver) == []
	assert not resolver.has_cycle(resolver.lookup("org.a.T.T0"))


def test_long_alias_ring_is_reported_once():
	root = _alias_chain(3000, ref("T0"))
	resolver = TypeResolver([root])

	(diag,) = check_type_cycles(root, resolver)
	assert diag.element.element == "T.T0"
	assert diag.message.startswith("Type definition cycle: org.a.T.T0 -> org.a.T.T1 -> ")
	assert diag.message.endswith(" -> org.a.T.T2999 -> org.a.T.T0")
	assert resolver.find_cycle(resolver.lookup("org.a.T.T1500"))[0] == "org.a.T.T1500"
