# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tsbind.bindgen.printer: Rust source rendering of the target tree.
"""

from .rust_printer import RustPrinter, print_unit, render_type

__all__ = ["RustPrinter", "print_unit", "render_type"]
