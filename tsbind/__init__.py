# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tsbind: generate Rust wasm-bindgen extern bindings from TypeScript declaration files.
"""
