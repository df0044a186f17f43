"""
Unit tests for spans and spanned values.
"""
import pytest
from pydantic import ValidationError
from dockspan.MODELS.parse_node import ParseNode, Rule
from dockspan.MODELS.span import Span, SpannedShort, SpannedString


def test_new_and_from_node():
    node = ParseNode(rule=Rule.WORKDIR_PATH, text="/app", start=8, end=12)
    assert Span.from_node(node) == Span.new(8, 12)
    assert Span.new(8, 12).length == 4

def test_start_after_end_is_rejected():
    with pytest.raises(ValidationError):
        Span.new(5, 4)

def test_negative_offsets_are_rejected():
    with pytest.raises(ValidationError):
        Span.new(-1, 4)

def test_empty_span():
    span = Span.new(3, 3)
    assert span.length == 0
    assert span.slice("abcdef") == ""

def test_union_and_contains():
    a = Span.new(2, 5)
    b = Span.new(7, 9)
    union = a.union(b)
    assert union == Span.new(2, 9)
    assert union == b.union(a)
    assert union.contains(a)
    assert union.contains(b)
    assert not a.contains(b)
    assert a.contains(a)

def test_slice():
    source = "expose 8000/udp"
    assert Span.new(7, 11).slice(source) == "8000"
    assert Span.new(12, 15).slice(source) == "udp"

def test_slice_uses_byte_offsets():
    source = "é!"
    assert Span.new(0, 2).slice(source) == "é"
    assert Span.new(2, 3).slice(source) == "!"

def test_spans_are_immutable():
    span = Span.new(1, 2)
    with pytest.raises(ValidationError):
        span.start = 0

def test_spanned_short_range():
    assert SpannedShort(span=Span.new(0, 5), content=65535).content == 65535
    with pytest.raises(ValidationError):
        SpannedShort(span=Span.new(0, 5), content=65536)
    with pytest.raises(ValidationError):
        SpannedShort(span=Span.new(0, 2), content=-1)

def test_spanned_string_equality():
    a = SpannedString(span=Span.new(0, 3), content="foo")
    assert a == SpannedString(span=Span.new(0, 3), content="foo")
    assert a != SpannedString(span=Span.new(1, 4), content="foo")
