# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import dataclasses

import pytest
from lark import Token

from zlang.core.location import SourceLocation


def test_start_is_first_character() -> None:
	loc = SourceLocation.start()
	assert (loc.offset, loc.line, loc.column) == (0, 1, 1)
	assert not loc.is_span
	assert str(loc) == "1:1"


def test_locations_order_by_offset() -> None:
	a = SourceLocation(offset=3, line=1, column=4)
	b = SourceLocation(offset=10, line=2, column=1)
	assert a < b
	assert sorted([b, a]) == [a, b]


def test_locations_are_immutable() -> None:
	loc = SourceLocation(offset=0, line=1, column=1)
	with pytest.raises(dataclasses.FrozenInstanceError):
		loc.line = 2  # type: ignore[misc]


def test_from_token_copies_start_and_end() -> None:
	tok = Token("NAME", "abc", start_pos=4, line=2, column=3, end_line=2, end_column=6, end_pos=7)
	loc = SourceLocation.from_token(tok)
	assert loc == SourceLocation(4, 2, 3, end_offset=7, end_line=2, end_column=6)
	assert loc.is_span


def test_span_to_uses_end_of_other() -> None:
	first = SourceLocation(0, 1, 1, end_offset=2, end_line=1, end_column=3)
	last = SourceLocation(5, 1, 6, end_offset=8, end_line=1, end_column=9)
	span = first.span_to(last)
	assert (span.offset, span.line, span.column) == (0, 1, 1)
	assert (span.end_offset, span.end_line, span.end_column) == (8, 1, 9)


def test_span_to_point_location_ends_at_its_start() -> None:
	span = SourceLocation(0, 1, 1).span_to(SourceLocation(4, 1, 5))
	assert (span.end_offset, span.end_line, span.end_column) == (4, 1, 5)
