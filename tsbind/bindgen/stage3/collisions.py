# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Identifier Collision Resolver.

Foreign declarations may repeat a name (overloads, declaration merging); the
target language may not. Within one extern block, names are unique per owner:
free functions and statics share one namespace, and each type's members share
another. The first binding of a name keeps it; later ones get `_1`, `_2`, ...
(the first free suffix) while their host name stays the original one.

Also here:
  - `Self` in a member signature is rewritten to the owning type, since an
    extern block has no implicit `Self`.
  - Repeated opaque types (an interface merged with a class, a re-opened
    interface) fold into the first one, merging their `extends` lists.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from tsbind.bindgen.stage1.binding_nodes import (
	SELF,
	BindingItem,
	ExternFunction,
	ExternStatic,
	Named,
	OpaqueType,
	TypeRepr,
	map_type_tree,
	rewrite_types,
)
from tsbind.bindgen.stage2.target_nodes import TargetUnit


def _bare(name: str) -> str:
	return name[2:] if name.startswith("r#") else name


class CollisionResolver:
	"""Resolves duplicate names within one extern block."""

	def __init__(self) -> None:
		self._taken: Dict[Optional[str], Set[str]] = {}
		self._types: Dict[str, OpaqueType] = {}

	def resolve(self, items: List[BindingItem]) -> List[BindingItem]:
		"""
		Resolve `items` (one block) in order; returns the surviving items.

		Functions and statics are renamed in place.
		"""
		self._taken = {}
		self._types = {}
		out: List[BindingItem] = []
		for item in items:
			if isinstance(item, OpaqueType):
				first = self._types.get(item.name)
				if first is not None:
					for ext in item.meta.extends:
						if ext not in first.meta.extends:
							first.meta.extends.append(ext)
					continue
				self._types[item.name] = item
			elif isinstance(item, ExternFunction):
				if item.meta.owner is not None:
					_rewrite_self(item, item.meta.owner)
				self._claim(item, item.meta.owner)
			elif isinstance(item, ExternStatic):
				self._claim(item, None)
			out.append(item)
		return out

	def _claim(self, item, owner: Optional[str]) -> None:
		taken = self._taken.setdefault(owner, set())
		if item.name not in taken:
			taken.add(item.name)
			return
		base = _bare(item.name)
		counter = 1
		candidate = f"{base}_{counter}"
		while candidate in taken:
			counter += 1
			candidate = f"{base}_{counter}"
		taken.add(candidate)
		constructor = isinstance(item, ExternFunction) and item.meta.constructor
		if item.meta.js_name is None and not constructor:
			item.meta.js_name = base
		item.name = candidate


def _rewrite_self(fn: ExternFunction, owner: str) -> None:
	target = Named((owner,))

	def _swap(node: TypeRepr) -> Optional[TypeRepr]:
		return target if node == SELF else None

	rewrite_types(fn, lambda ty, _is_return: map_type_tree(ty, _swap))


def resolve_unit(unit: TargetUnit) -> TargetUnit:
	"""Resolve collisions in every extern block of `unit` (in place)."""
	resolver = CollisionResolver()
	for _path, block in unit.extern_blocks():
		block.items = resolver.resolve(block.items)
	return unit


__all__ = ["CollisionResolver", "resolve_unit"]
