# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module/Namespace Composer: a parsed unit -> target tree.

Pipeline placement:
  parser (Module) -> ModuleComposer (this file) -> stage3 passes -> printer

Layout of a composed unit:
  1. `use` items from imports and re-exports (source order)
  2. `use wasm_bindgen::prelude::wasm_bindgen;` when the unit binds anything
  3. one `pub mod XMod { ... }` per namespace
  4. one extern block with the unit's top-level bindings

A namespace scope starts with `use super::*;` so names of the enclosing unit
resolve unchanged, and every binding inside it (nested scopes included) is
tagged with the namespace path.

Visibility: a module file (one with import/export syntax) binds only what it
exports; a script file binds every top-level declaration. `declare global`
blocks always bind, untagged.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from tsbind.bindgen.config import DEFAULT_OPTIONS, BindgenOptions
from tsbind.bindgen.core.diagnostics import DiagnosticSink
from tsbind.bindgen.core.idents import scope_ident
from tsbind.bindgen.parser import ast
from tsbind.bindgen.stage1.binding_nodes import BindingItem
from tsbind.bindgen.stage1.decl_lower import DeclLowerer, namespace_body

from .import_export import exported_local_names, translate_imports
from .target_nodes import ExternBlock, ScopeModule, TargetItem, TargetUnit, UseItem


def _is_scoped_namespace(decl: ast.Decl) -> bool:
	return (
		isinstance(decl, ast.NamespaceDecl)
		and not decl.is_global
		and not decl.is_string_name
		and namespace_body(decl) is not None
	)


def tag_namespace(items: List[TargetItem], name: str) -> None:
	"""Prepend `name` to the namespace path of every binding under `items`."""
	for item in items:
		if isinstance(item, ExternBlock):
			for binding in item.items:
				binding.meta.js_namespace.insert(0, name)
		elif isinstance(item, ScopeModule):
			tag_namespace(item.items, name)


class ModuleComposer:
	"""
	Builds the target tree of one unit.

	Lowering errors are not caught here; a fatal error in any declaration
	halts the whole unit.
	"""

	def __init__(
		self,
		sink: Optional[DiagnosticSink] = None,
		options: Optional[BindgenOptions] = None,
		lowerer: Optional[DeclLowerer] = None,
	) -> None:
		self.sink = sink if sink is not None else DiagnosticSink()
		self.options = options or DEFAULT_OPTIONS
		self.lowerer = lowerer or DeclLowerer(self.sink, self.options)

	def compose_module(self, module: ast.Module) -> TargetUnit:
		uses = translate_imports(module.body, self.options, self.sink)
		scopes, bindings = self._compose_declarations(visible_declarations(module))
		for stmt in module.body:
			if isinstance(stmt, ast.NamespaceExport):
				for binding in bindings:
					binding.meta.js_namespace.insert(0, stmt.name)
				tag_namespace(scopes, stmt.name)
		items: List[TargetItem] = list(uses)
		if bindings or next(TargetUnit(items=list(scopes)).bindings(), None) is not None:
			items.append(self.prelude())
		items.extend(scopes)
		if bindings:
			items.append(ExternBlock(items=bindings))
		return TargetUnit(items=items)

	def compose_namespace(self, decl: ast.NamespaceDecl) -> ScopeModule:
		"""
		Compose a namespace declaration into its scope module.

		Everything declared in a namespace body is visible, exported or not.
		"""
		scopes, bindings = self._compose_declarations(namespace_body(decl) or [])
		items: List[TargetItem] = [UseItem(path=("super",), glob=True, public=False)]
		items.extend(scopes)
		if bindings:
			items.append(ExternBlock(items=bindings))
		tag_namespace(items, decl.name)
		return ScopeModule(name=scope_ident(decl.name, self.options.module_suffix), items=items)

	def prelude(self) -> UseItem:
		path = self.options.bindgen_path + ("prelude",)
		return UseItem(path=path, name="wasm_bindgen", public=False)

	def _compose_declarations(self, decls: List[ast.Decl]):
		"""Scope modules (merged by name, first-seen order) and flat bindings."""
		scopes: Dict[str, ScopeModule] = {}
		bindings: List[BindingItem] = []
		for decl in decls:
			if _is_scoped_namespace(decl):
				scope = self.compose_namespace(decl)
				existing = scopes.get(scope.name)
				if existing is None:
					scopes[scope.name] = scope
				else:
					_merge_scope(existing, scope)
			else:
				bindings.extend(self.lowerer.lower(decl))
		return list(scopes.values()), bindings


def _merge_scope(into: ScopeModule, other: ScopeModule) -> None:
	"""Fold a re-opened namespace into the first scope module of that name."""
	nested: Dict[str, ScopeModule] = {item.name: item for item in into.items if isinstance(item, ScopeModule)}
	block = next((item for item in into.items if isinstance(item, ExternBlock)), None)
	for item in other.items:
		if isinstance(item, UseItem):
			continue
		if isinstance(item, ScopeModule):
			if item.name in nested:
				_merge_scope(nested[item.name], item)
			else:
				nested[item.name] = item
				_insert_before_block(into, item)
		elif isinstance(item, ExternBlock):
			if block is None:
				block = ExternBlock()
				into.items.append(block)
			block.items.extend(item.items)


def _insert_before_block(scope: ScopeModule, item: ScopeModule) -> None:
	for idx, existing in enumerate(scope.items):
		if isinstance(existing, ExternBlock):
			scope.items.insert(idx, item)
			return
	scope.items.append(item)


def visible_declarations(module: ast.Module) -> List[ast.Decl]:
	"""Top-level declarations that produce bindings, in source order."""
	if not module.is_module_file():
		return [stmt for stmt in module.body if isinstance(stmt, ast.Decl)]
	by_reference: Set[str] = exported_local_names(module.body)
	out: List[ast.Decl] = []
	for stmt in module.body:
		if isinstance(stmt, (ast.ExportDecl, ast.ExportDefaultDecl)):
			out.append(stmt.decl)
		elif isinstance(stmt, ast.NamespaceDecl) and stmt.is_global:
			out.append(stmt)
		elif isinstance(stmt, ast.Decl) and ast.decl_name(stmt) in by_reference:
			out.append(stmt)
	return out


__all__ = ["ModuleComposer", "visible_declarations", "tag_namespace"]
