# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Stage 2 package: target tree, import/export translation, module composition.

Pipeline placement:
  stage1 (binding items) -> stage2 (target tree) -> stage3 (legalization)

Public API:
  - target tree node classes
  - translate_imports
  - ModuleComposer entry point
"""

from .target_nodes import TargetNode, UseItem, ExternBlock, ScopeModule, TargetItem, TargetUnit
from .import_export import translate_imports, exported_local_names
from .compose import ModuleComposer, visible_declarations, tag_namespace

__all__ = [
	"TargetNode",
	"UseItem",
	"ExternBlock",
	"ScopeModule",
	"TargetItem",
	"TargetUnit",
	"translate_imports",
	"exported_local_names",
	"ModuleComposer",
	"visible_declarations",
	"tag_namespace",
]
