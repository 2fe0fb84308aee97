# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tsbind.bindgen.parser: `.d.ts` front-end (lark grammar + AST builder).
"""

from .parser import parse_module

__all__ = ["parse_module"]
