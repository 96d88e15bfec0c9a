# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Name resolution for type references across an import closure, and cycle
detection over the resulting type reference graph.

Resolution rules for a derived reference `N` used inside element `E` of
document `D` (first hit wins):

1. unqualified `N`: a type of `E`, then of `E`'s base interfaces, then of an
   anonymous type collection of `D`;
2. `D.name + "." + N` (e.g. `Types.Color` from the same package);
3. `N` as a fully qualified name (`org.example.Types.Color`);
4. `ns + "." + N` for every `import ns.* from ...` of `D`.

Only documents handed to the resolver (normally the closure) are visible.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from fidlcheck.model import (
	Document,
	Interface,
	TypeCollection,
	TypeDecl,
	TypeRef,
	referenced_types,
)
from fidlcheck.paths import normalize_path
from fidlcheck.symbol_index import qualify


@dataclass(frozen=True)
class ResolvedType:
	"""A declaration together with where it lives."""

	fqn: str
	decl: TypeDecl
	document: Document
	element: TypeCollection

	@property
	def element_path(self) -> str:
		return f"{self.element.name}.{self.decl.name}" if self.element.name else self.decl.name


class TypeResolver:
	"""Resolves TypeRefs over a fixed set of documents."""

	def __init__(self, documents: Iterable[Document]) -> None:
		self._types: Dict[str, ResolvedType] = {}
		self._elements: Dict[str, Tuple[Document, TypeCollection]] = {}
		self._documents: Dict[str, Document] = {}
		for doc in documents:
			self._documents[normalize_path(doc.source_path)] = doc
			for element in doc.elements():
				if element.name:
					self._elements.setdefault(qualify(doc.name, element.name), (doc, element))
				for decl in element.types:
					fqn = qualify(qualify(doc.name, element.name), decl.name) if element.name else qualify(doc.name, decl.name)
					self._types.setdefault(fqn, ResolvedType(fqn=fqn, decl=decl, document=doc, element=element))

	def lookup(self, fqn: str) -> Optional[ResolvedType]:
		return self._types.get(fqn)

	def owner_of(self, document: Document, element: TypeCollection, decl: TypeDecl) -> ResolvedType:
		"""ResolvedType for a declaration the caller already holds."""
		if element.name:
			fqn = qualify(qualify(document.name, element.name), decl.name)
		else:
			fqn = qualify(document.name, decl.name)
		found = self._types.get(fqn)
		if found is not None and found.decl is decl:
			return found
		return ResolvedType(fqn=fqn, decl=decl, document=document, element=element)

	def resolve(self, ref: TypeRef, document: Document, element: TypeCollection) -> Optional[ResolvedType]:
		"""Declaration `ref` points at, or None for primitives and unknown names."""
		if ref.is_primitive or not ref.derived:
			return None
		name = ref.derived
		if "." not in name:
			local = self._resolve_local(name, document, element)
			if local is not None:
				return local
		for candidate in self._candidates(name, document):
			found = self._types.get(candidate)
			if found is not None:
				return found
		return None

	def _candidates(self, name: str, document: Document) -> Iterator[str]:
		yield qualify(document.name, name)
		yield name
		for imp in document.imports:
			if imp.namespace and imp.namespace.endswith(".*"):
				yield qualify(imp.namespace[:-2], name)

	def _resolve_local(self, name: str, document: Document, element: TypeCollection) -> Optional[ResolvedType]:
		seen: set[int] = set()
		cur_doc: Document = document
		cur: Optional[TypeCollection] = element
		# Walk the element and its base interfaces; `seen` guards extends-cycles.
		while cur is not None and id(cur) not in seen:
			seen.add(id(cur))
			decl = cur.find_type(name)
			if decl is not None:
				return self.owner_of(cur_doc, cur, decl)
			base = cur.base if isinstance(cur, Interface) else None
			if not base:
				break
			hit = self._elements.get(qualify(cur_doc.name, base)) or self._elements.get(base)
			if hit is None:
				break
			cur_doc, cur = hit
		for tc in document.type_collections:
			if not tc.name:
				decl = tc.find_type(name)
				if decl is not None:
					return self.owner_of(document, tc, decl)
		return None

	def edges(self, node: ResolvedType) -> List[ResolvedType]:
		"""Declarations `node` references, in declaration order."""
		out: List[ResolvedType] = []
		for ref in referenced_types(node.decl):
			target = self.resolve(ref, node.document, node.element)
			if target is not None:
				out.append(target)
		return out

	def find_cycle(self, start: ResolvedType) -> Optional[List[str]]:
		"""
		First cycle reachable from `start`, as a list of fqns whose last entry
		repeats the first member of the cycle; None when the reachable graph is
		acyclic.

		Depth-first, with an explicit stack: alias chains can be arbitrarily
		long.
		"""
		visited: set[str] = {start.fqn}
		stack: List[str] = [start.fqn]
		onstack: set[str] = {start.fqn}
		# pending[i] yields the unexplored edges of stack[i]
		pending: List[Iterator[ResolvedType]] = [iter(self.edges(start))]
		while pending:
			nxt = next(pending[-1], None)
			if nxt is None:
				pending.pop()
				onstack.remove(stack.pop())
				continue
			if nxt.fqn in onstack:
				i = stack.index(nxt.fqn)
				return stack[i:] + [nxt.fqn]
			if nxt.fqn not in visited:
				visited.add(nxt.fqn)
				stack.append(nxt.fqn)
				onstack.add(nxt.fqn)
				pending.append(iter(self.edges(nxt)))
		return None

	def has_cycle(self, start: ResolvedType) -> bool:
		return self.find_cycle(start) is not None

	def cycles(self, nodes: Iterable[ResolvedType]) -> List[List[str]]:
		"""
		Every strongly connected component reachable from `nodes` that forms a
		cycle (more than one member, or a member referencing itself). Each
		component is returned once, members ordered by discovery.

		Tarjan's algorithm, with an explicit stack as well.
		"""
		index_of: Dict[str, int] = {}
		low: Dict[str, int] = {}
		stack: List[str] = []
		onstack: set[str] = set()
		self_loops: set[str] = set()
		frames: List[Tuple[str, Iterator[ResolvedType]]] = []
		result: List[List[str]] = []

		def enter(node: ResolvedType) -> None:
			index_of[node.fqn] = low[node.fqn] = len(index_of)
			stack.append(node.fqn)
			onstack.add(node.fqn)
			frames.append((node.fqn, iter(self.edges(node))))

		for root in nodes:
			if root.fqn in index_of:
				continue
			enter(root)
			while frames:
				fqn, pending = frames[-1]
				nxt = next(pending, None)
				if nxt is not None:
					if nxt.fqn == fqn:
						self_loops.add(fqn)
					if nxt.fqn not in index_of:
						enter(nxt)
					elif nxt.fqn in onstack:
						low[fqn] = min(low[fqn], index_of[nxt.fqn])
					continue

				frames.pop()
				if low[fqn] == index_of[fqn]:
					component: List[str] = []
					while True:
						member = stack.pop()
						onstack.remove(member)
						component.append(member)
						if member == fqn:
							break
					if len(component) > 1 or fqn in self_loops:
						component.sort(key=lambda f: index_of[f])
						result.append(component)
				if frames:
					parent = frames[-1][0]
					low[parent] = min(low[parent], low[fqn])
		return result


__all__ = ["ResolvedType", "TypeResolver"]
