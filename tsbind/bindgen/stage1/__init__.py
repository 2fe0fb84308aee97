# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stage 1 package: binding items, type mapping, generics erasure, declaration lowering.

Pipeline placement:
  parser (AST) -> stage1 (binding items) -> stage2 (target tree) -> stage3 -> printer

Public API:
  - binding item and type representation classes
  - TypeMapper (foreign type -> TypeRepr)
  - erase_generics / erase_type / generics_scope
  - DeclLowerer entry point
"""

from .binding_nodes import (
	TypeRepr,
	Primitive,
	DynamicValue,
	Named,
	Reference,
	OptionOf,
	BoxedSlice,
	TupleOf,
	Callable,
	F64,
	BOOL,
	STRING,
	UNIT,
	DYNAMIC,
	SELF,
	optional_of,
	map_type_tree,
	walk_types,
	BindingMeta,
	BindingItem,
	OpaqueType,
	ExternParam,
	ExternFunction,
	ExternStatic,
	rewrite_types,
	item_types,
)
from .generics_erase import GenericsScope, EMPTY_SCOPE, generics_scope, erase_type, erase_generics
from .type_map import TypeMapper
from .decl_lower import DeclLowerer, RECEIVER_NAME, namespace_body, namespace_declarations

__all__ = [
	"TypeRepr",
	"Primitive",
	"DynamicValue",
	"Named",
	"Reference",
	"OptionOf",
	"BoxedSlice",
	"TupleOf",
	"Callable",
	"F64",
	"BOOL",
	"STRING",
	"UNIT",
	"DYNAMIC",
	"SELF",
	"optional_of",
	"map_type_tree",
	"walk_types",
	"BindingMeta",
	"BindingItem",
	"OpaqueType",
	"ExternParam",
	"ExternFunction",
	"ExternStatic",
	"rewrite_types",
	"item_types",
	"GenericsScope",
	"EMPTY_SCOPE",
	"generics_scope",
	"erase_type",
	"erase_generics",
	"TypeMapper",
	"DeclLowerer",
	"RECEIVER_NAME",
	"namespace_declarations",
	"namespace_body",
]
