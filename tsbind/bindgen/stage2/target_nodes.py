# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Target tree: the shape of one emitted Rust source file.

A unit is a flat list of top-level items:
  - `UseItem` (imports, re-exports, the wasm_bindgen prelude)
  - `ScopeModule` (`pub mod XMod { ... }` for a foreign namespace)
  - `ExternBlock` (one `#[wasm_bindgen] extern "C" { ... }`)

Scope modules nest the same items recursively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from tsbind.bindgen.stage1.binding_nodes import BindingItem


class TargetNode:
	"""Base class for target tree nodes."""
	pass


@dataclass
class UseItem(TargetNode):
	"""
	`[pub] use path::name [as alias];` or `[pub] use path::*;` (glob).

	`path` holds the leading segments; `name` is the imported leaf (unused for
	globs). A path starting with `""` renders with a leading `::`.
	"""
	path: Tuple[str, ...]
	name: Optional[str] = None
	alias: Optional[str] = None
	public: bool = True
	glob: bool = False

	@property
	def bound_name(self) -> Optional[str]:
		"""The name this use introduces into the scope (None for globs)."""
		if self.glob:
			return None
		return self.alias or self.name


@dataclass
class ExternBlock(TargetNode):
	items: List[BindingItem] = field(default_factory=list)


@dataclass
class ScopeModule(TargetNode):
	name: str
	items: List["TargetItem"] = field(default_factory=list)


TargetItem = Union[UseItem, ExternBlock, ScopeModule]


@dataclass
class TargetUnit(TargetNode):
	items: List[TargetItem] = field(default_factory=list)

	def extern_blocks(self) -> Iterator[Tuple[Tuple[str, ...], ExternBlock]]:
		"""Every extern block with the scope path leading to it (root is `()`)."""
		yield from _extern_blocks(self.items, ())

	def bindings(self) -> Iterator[BindingItem]:
		for _path, block in self.extern_blocks():
			yield from block.items

	def top_level_uses(self) -> List[UseItem]:
		return [item for item in self.items if isinstance(item, UseItem)]


def _extern_blocks(items: List[TargetItem], path: Tuple[str, ...]) -> Iterator[Tuple[Tuple[str, ...], ExternBlock]]:
	for item in items:
		if isinstance(item, ExternBlock):
			yield path, item
		elif isinstance(item, ScopeModule):
			yield from _extern_blocks(item.items, path + (item.name,))


__all__ = ["TargetNode", "UseItem", "ExternBlock", "ScopeModule", "TargetItem", "TargetUnit"]
