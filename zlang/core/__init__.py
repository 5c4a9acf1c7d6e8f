# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared front-end data: source locations and diagnostics."""

from .diagnostics import Diagnostic
from .location import SourceLocation

__all__ = ["Diagnostic", "SourceLocation"]
