# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stage 3 package: passes over the composed target tree.

Pipeline placement:
  stage2 (target tree) -> stage3 (this package) -> printer

Public API:
  - CollisionResolver / resolve_unit
  - abi_safe_set / collect_custom_names / AbiLegalizer / legalize_unit
  - collect_catalog_uses / add_catalog_uses
"""

from .collisions import CollisionResolver, resolve_unit
from .abi_legalize import (
	SLICEABLE_PRIMITIVES,
	NON_SLICEABLE_PRIMITIVES,
	abi_safe_set,
	collect_custom_names,
	AbiLegalizer,
	legalize_unit,
)
from .sys_uses import referenced_names, declared_names, collect_catalog_uses, add_catalog_uses

__all__ = [
	"CollisionResolver",
	"resolve_unit",
	"SLICEABLE_PRIMITIVES",
	"NON_SLICEABLE_PRIMITIVES",
	"abi_safe_set",
	"collect_custom_names",
	"AbiLegalizer",
	"legalize_unit",
	"referenced_names",
	"declared_names",
	"collect_catalog_uses",
	"add_catalog_uses",
]
