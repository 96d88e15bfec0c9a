# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from fidlcheck.checks.map_keys import KEY_TYPE_MESSAGE, check_map_key, check_map_keys
from fidlcheck.core.diagnostics import ERROR
from fidlcheck.model import ArrayType, MapType, TypeDef, UnionType
from fidlcheck.test_support import doc, enum, iface, prim, ref, struct, tc
from fidlcheck.type_resolver import TypeResolver

# Declarations every case can point a map key at.
SHARED = (
	enum("Color", ("RED", "1")),
	struct("Point", (prim("Int32"), "x")),
	UnionType(name="Either"),
	ArrayType(name="Points", element_type=ref("Point")),
	MapType(name="Inner", key_type=prim("String"), value_type=prim("String")),
	TypeDef(name="Id", actual_type=prim("UInt32")),
	TypeDef(name="Shade", actual_type=ref("Color")),
	TypeDef(name="Where", actual_type=ref("Point")),
	TypeDef(name="Deep", actual_type=ref("Shade")),
	TypeDef(name="Ghost", actual_type=ref("Nowhere")),
	TypeDef(name="Loop1", actual_type=ref("Loop2")),
	TypeDef(name="Loop2", actual_type=ref("Loop1")),
)


def _check(key):
	m = MapType(name="M", key_type=key, value_type=prim("String"))
	document = doc("org.a", "/p/a.fidl", tc("Types", *SHARED, m))
	resolver = TypeResolver([document])
	return check_map_key(m, document=document, element=document.type_collections[0], resolver=resolver)


@pytest.mark.parametrize(
	"key",
	[
		prim("UInt8"),
		prim("String"),
		ref("Color"),
		ref("Types.Color"),
		ref("org.a.Types.Color"),
		ref("Id"),
		ref("Shade"),
		ref("Deep"),
		ref("Nowhere"),
		ref("Ghost"),
		ref("Loop1"),
	],
)
def test_acceptable_or_deferred_keys_are_silent(key):
	assert _check(key) is None


@pytest.mark.parametrize("name", ["Point", "Either", "Points", "Inner", "Where"])
def test_compound_keys_are_errors(name):
	diag = _check(ref(name))

	assert diag is not None
	assert diag.severity == ERROR
	assert diag.message == KEY_TYPE_MESSAGE
	assert diag.element.element == "Types.M"
	assert diag.element.feature == "keyType"


def test_key_error_notes_where_the_alias_chain_ends():
	diag = _check(ref("Where"))

	assert diag.notes == ("key type 'Where' resolves to struct org.a.Types.Point",)


def test_cycle_through_the_value_silences_the_check():
	m = MapType(name="M", key_type=ref("Point"), value_type=ref("Loop1"))
	document = doc("org.a", "/p/a.fidl", tc("Types", *SHARED, m))
	resolver = TypeResolver([document])

	assert check_map_key(m, document=document, element=document.type_collections[0], resolver=resolver) is None


def test_key_resolves_through_imported_file():
	shared = doc("org.common", "/p/common.fidl", tc("Common", struct("Pair", (prim("Int8"), "a"))))
	m = MapType(name="M", key_type=ref("org.common.Common.Pair"), value_type=prim("String"))
	root = doc("org.a", "/p/a.fidl", tc("", m), imports=["common.fidl"])
	resolver = TypeResolver([root, shared])

	(diag,) = check_map_keys(root, resolver)
	assert diag.element.element == "M"


def test_check_map_keys_visits_interfaces():
	m = MapType(name="Bad", key_type=ref("Point"), value_type=prim("String"))
	root = doc("org.a", "/p/a.fidl", iface("Api", types=[struct("Point"), m]))

	(diag,) = check_map_keys(root, TypeResolver([root]))
	assert diag.element.element == "Api.Bad"
