# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
zlang front-end package.

The parser and its AST live under `zlang.parser`; source locations and
diagnostics under `zlang.core`. The CLI entrypoint is `zlang.zlangc:main`.
"""

__all__ = []
