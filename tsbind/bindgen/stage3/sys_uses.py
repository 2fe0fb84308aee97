# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Host catalog `use` synthesis.

A bare type name the unit neither declares nor re-exports, but which a host
binding crate exports, gets an absolute import at the top of the unit:

  use ::web_sys::HtmlElement;
  use ::js_sys::Promise;

`web_sys` wins when both crates export a name. Runs after legalization, so
only names that survived into the output are imported.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.catalogs import JS_SYS, WEB_SYS, host_crate_for
from tsbind.bindgen.stage1.binding_nodes import Named, OpaqueType, item_types, walk_types
from tsbind.bindgen.stage2.target_nodes import TargetUnit, UseItem


def referenced_names(unit: TargetUnit) -> Set[str]:
	"""Single-segment type names referenced anywhere in the unit's bindings."""
	names: Set[str] = set()
	for item in unit.bindings():
		for ty in item_types(item):
			for node in walk_types(ty):
				if isinstance(node, Named) and len(node.path) == 1:
					names.add(node.path[0])
		for ext in item.meta.extends:
			if len(ext) == 1:
				names.add(ext[0])
	return names


def declared_names(unit: TargetUnit) -> Set[str]:
	"""Names the unit provides itself: opaque types and `use`-bound names."""
	names: Set[str] = {item.name for item in unit.bindings() if isinstance(item, OpaqueType)}
	names.update(use.bound_name for use in unit.top_level_uses() if use.bound_name is not None)
	return names


def collect_catalog_uses(
	unit: TargetUnit,
	pubs: Optional[Iterable[str]] = None,
	options: Optional[BindgenOptions] = None,
) -> List[UseItem]:
	"""
	`use` items for host types the unit references but does not provide.

	`pubs` overrides the provided-name set (defaults to `declared_names`).
	Sorted by crate, then name.
	"""
	options = options or DEFAULT_OPTIONS
	provided = set(pubs) if pubs is not None else declared_names(unit)
	crate_names = {WEB_SYS: options.web_sys_crate, JS_SYS: options.js_sys_crate}
	uses: List[UseItem] = []
	for name in sorted(referenced_names(unit) - provided):
		crate = host_crate_for(name)
		if crate is None:
			continue
		uses.append(UseItem(path=("", crate_names[crate]), name=name, public=False))
	uses.sort(key=lambda u: (u.path, u.name))
	return uses


def add_catalog_uses(unit: TargetUnit, options: Optional[BindgenOptions] = None) -> TargetUnit:
	"""Prepend the synthesized host uses to `unit` (in place)."""
	unit.items[:0] = collect_catalog_uses(unit, options=options)
	return unit


__all__ = ["referenced_names", "declared_names", "collect_catalog_uses", "add_catalog_uses"]
