# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type reference graph checks: definition cycles and dangling references.

A cycle (`typedef A is B`, `typedef B is A`, or a struct containing itself)
has no finite layout. Each cycle is reported once, anchored at whichever of
its members the root document declares first.
"""

from __future__ import annotations

from typing import Dict, List

from fidlcheck.checks import make_diagnostic
from fidlcheck.core.diagnostics import ERROR, Diagnostic
from fidlcheck.model import Document, referenced_types
from fidlcheck.type_resolver import ResolvedType, TypeResolver


def _root_types(document: Document, resolver: TypeResolver) -> List[ResolvedType]:
	return [resolver.owner_of(document, element, decl) for element in document.elements() for decl in element.types]


def check_type_cycles(document: Document, resolver: TypeResolver) -> List[Diagnostic]:
	nodes = _root_types(document, resolver)
	order: Dict[str, int] = {n.fqn: i for i, n in enumerate(nodes)}
	by_fqn = {n.fqn: n for n in nodes}
	out: List[Diagnostic] = []
	for component in resolver.cycles(nodes):
		local = [fqn for fqn in component if fqn in order]
		if not local:
			# Cycle lives entirely in an imported file; reported when that file is validated.
			continue
		anchor = by_fqn[min(local, key=order.__getitem__)]
		start = component.index(anchor.fqn)
		ring = component[start:] + component[:start] + [anchor.fqn]
		message = "Type definition cycle: " + " -> ".join(ring)
		out.append(make_diagnostic(ERROR, message, document, anchor.element_path, "name", span=anchor.decl.span))
	return out


def check_type_references(document: Document, resolver: TypeResolver) -> List[Diagnostic]:
	out: List[Diagnostic] = []
	for node in _root_types(document, resolver):
		for ref in referenced_types(node.decl):
			if ref.is_primitive or resolver.resolve(ref, document, node.element) is not None:
				continue
			message = f"Unresolved type reference '{ref.display()}'"
			out.append(make_diagnostic(ERROR, message, document, node.element_path, span=ref.span))
	for iface in document.interfaces:
		for method in iface.methods:
			for arg in method.in_args + method.out_args:
				if arg.type.is_primitive or resolver.resolve(arg.type, document, iface) is not None:
					continue
				message = f"Unresolved type reference '{arg.type.display()}'"
				out.append(make_diagnostic(ERROR, message, document, f"{iface.name}.{method.name}.{arg.name}", span=arg.type.span))
	return out


__all__ = ["check_type_cycles", "check_type_references"]
