# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tsbind.bindgen: TypeScript declaration (.d.ts) -> wasm-bindgen binding generator.

Pipeline:
  parser -> stage1 (lowering) -> stage2 (composition) -> stage3 (collisions,
  ABI legalization, host uses) -> printer

Entry points:
  - compile_source: one source text -> UnitResult
  - OutputTree: mirror a directory of declaration files
  - main: the CLI
"""

from .config import BindgenOptions, DEFAULT_OPTIONS
from .pipeline import UnitResult, compile_module, compile_source

__all__ = ["BindgenOptions", "DEFAULT_OPTIONS", "UnitResult", "compile_module", "compile_source"]
