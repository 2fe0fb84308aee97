# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rust source printer for the target tree.

Output shape (4-space indented, as rustfmt would lay it out):

  use ::web_sys::Node;
  pub use super::otherMod::Thing;
  use wasm_bindgen::prelude::wasm_bindgen;

  pub mod NsMod {
      use super::*;
      #[wasm_bindgen]
      extern "C" {
          ...
      }
  }

  #[wasm_bindgen]
  extern "C" {
      #[wasm_bindgen(extends = Node)]
      pub type Element;
      #[wasm_bindgen(method, getter, js_name = "tagName")]
      pub fn tag_name(this: &Element) -> ::std::string::String;
  }

Built-in types are printed fully qualified so a foreign type that happens to be
called `String` or `Option` cannot shadow them.
"""

from __future__ import annotations

import json
from typing import List

from tsbind.bindgen.stage1.binding_nodes import (
	BindingItem,
	BindingMeta,
	BoxedSlice,
	Callable,
	DynamicValue,
	ExternFunction,
	ExternStatic,
	Named,
	OpaqueType,
	OptionOf,
	Primitive,
	Reference,
	TupleOf,
	TypeRepr,
)
from tsbind.bindgen.stage2.target_nodes import ExternBlock, ScopeModule, TargetItem, TargetUnit, UseItem

INDENT = "    "

_PRIMITIVE_PATHS = {
	"String": "::std::string::String",
	"()": "()",
}

_IDENT_SAFE = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


def render_type(ty: TypeRepr) -> str:
	if isinstance(ty, Primitive):
		return _PRIMITIVE_PATHS.get(ty.name, f"::core::primitive::{ty.name}")
	if isinstance(ty, DynamicValue):
		return "::wasm_bindgen::JsValue"
	if isinstance(ty, Named):
		return "::".join(ty.path)
	if isinstance(ty, Reference):
		return f"&{render_type(ty.inner)}"
	if isinstance(ty, OptionOf):
		return f"::std::option::Option<{render_type(ty.inner)}>"
	if isinstance(ty, BoxedSlice):
		return f"::std::boxed::Box<[{render_type(ty.inner)}]>"
	if isinstance(ty, TupleOf):
		if len(ty.elements) == 1:
			return f"({render_type(ty.elements[0])},)"
		return "(" + ", ".join(render_type(e) for e in ty.elements) + ")"
	if isinstance(ty, Callable):
		params = ", ".join(render_type(p) for p in ty.params)
		ret = f" -> {render_type(ty.ret)}" if ty.ret is not None else ""
		return f"dyn Fn({params}){ret}"
	raise TypeError(f"cannot render type {type(ty).__name__}")


def render_use(use: UseItem) -> str:
	vis = "pub " if use.public else ""
	path = list(use.path)
	if use.glob:
		return f"{vis}use {'::'.join(path + ['*'])};"
	text = "::".join(path + [use.name])
	if use.alias is not None:
		text += f" as {use.alias}"
	return f"{vis}use {text};"


def _namespace_arg(path: List[str]) -> str:
	if len(path) == 1 and path[0] and set(path[0]) <= _IDENT_SAFE and not path[0][0].isdigit():
		return path[0]
	return "[" + ", ".join(json.dumps(seg) for seg in path) + "]"


def render_attrs(meta: BindingMeta) -> str:
	"""The merged `#[wasm_bindgen(...)]` attribute for a binding ("" when bare)."""
	args: List[str] = []
	if meta.constructor:
		args.append("constructor")
	if meta.static_method_of is not None:
		args.append(f"static_method_of = {meta.static_method_of}")
	if meta.method:
		args.append("method")
	if meta.getter:
		args.append("getter")
	if meta.setter:
		args.append("setter")
	args.extend(f"extends = {'::'.join(ext)}" for ext in meta.extends)
	if meta.js_name is not None:
		args.append(f"js_name = {json.dumps(meta.js_name)}")
	if meta.js_namespace:
		args.append(f"js_namespace = {_namespace_arg(meta.js_namespace)}")
	if not args:
		return ""
	return f"#[wasm_bindgen({', '.join(args)})]"


def render_binding(item: BindingItem) -> List[str]:
	lines: List[str] = []
	attrs = render_attrs(item.meta)
	if attrs:
		lines.append(attrs)
	if isinstance(item, OpaqueType):
		lines.append(f"pub type {item.name};")
	elif isinstance(item, ExternFunction):
		params = ", ".join(f"{p.name}: {render_type(p.ty)}" for p in item.params)
		ret = f" -> {render_type(item.ret)}" if item.ret is not None else ""
		lines.append(f"pub fn {item.name}({params}){ret};")
	elif isinstance(item, ExternStatic):
		lines.append(f"pub static {item.name}: {render_type(item.ty)};")
	else:
		raise TypeError(f"cannot render binding {type(item).__name__}")
	return lines


class RustPrinter:
	"""Renders a `TargetUnit` to Rust source text."""

	def __init__(self) -> None:
		self._lines: List[str] = []
		self._depth = 0

	def print_unit(self, unit: TargetUnit) -> str:
		self._lines = []
		self._depth = 0
		self._items(unit.items)
		return "\n".join(self._lines) + "\n" if self._lines else ""

	def _emit(self, line: str) -> None:
		self._lines.append(f"{INDENT * self._depth}{line}" if line else "")

	def _items(self, items: List[TargetItem]) -> None:
		prev_use = None
		for item in items:
			is_use = isinstance(item, UseItem)
			# Blank line between declarations and after a run of uses.
			if prev_use is not None and not (prev_use and is_use):
				self._emit("")
			prev_use = is_use
			if isinstance(item, UseItem):
				self._emit(render_use(item))
			elif isinstance(item, ScopeModule):
				self._scope(item)
			elif isinstance(item, ExternBlock):
				self._block(item)
			else:
				raise TypeError(f"cannot render item {type(item).__name__}")

	def _scope(self, scope: ScopeModule) -> None:
		self._emit("#[allow(non_snake_case)]")
		self._emit(f"pub mod {scope.name} {{")
		self._depth += 1
		self._items(scope.items)
		self._depth -= 1
		self._emit("}")

	def _block(self, block: ExternBlock) -> None:
		self._emit("#[wasm_bindgen]")
		self._emit('extern "C" {')
		self._depth += 1
		for item in block.items:
			for line in render_binding(item):
				self._emit(line)
		self._depth -= 1
		self._emit("}")


def print_unit(unit: TargetUnit) -> str:
	return RustPrinter().print_unit(unit)


__all__ = ["render_type", "render_use", "render_attrs", "render_binding", "RustPrinter", "print_unit"]
