# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Source spans and the spanned value wrappers attached to every AST value.
"""
from typing import TYPE_CHECKING, Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from .parse_node import ParseNode

T = TypeVar("T")

PORT_MAX = 65535

SOURCE_ENCODING = "utf-8"


def encode_source(source: str) -> bytes:
    return source.encode(SOURCE_ENCODING, "surrogatepass")


def decode_source(data: bytes) -> str:
    return data.decode(SOURCE_ENCODING, "surrogatepass")


class Span(BaseModel):
    """
    Half-open offset range [start, end) into the original source text.

    Offsets are byte offsets into the UTF-8 encoding of the source, so
    ``span.slice(source)`` yields exactly the text that produced the value.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def check_order(self) -> "Span":
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is past its end {self.end}")
        return self

    @classmethod
    def new(cls, start: int, end: int) -> "Span":
        return cls(start=start, end=end)

    @classmethod
    def from_node(cls, node: "ParseNode") -> "Span":
        """
        Derives the span exactly covering a parse node's matched text.

        :param node: The parse node.
        :return: A span with the node's offsets.
        """
        return cls(start=node.start, end=node.end)

    @property
    def length(self) -> int:
        return self.end - self.start

    def union(self, other: "Span") -> "Span":
        """Smallest span covering both spans."""
        return Span(start=min(self.start, other.start), end=max(self.end, other.end))

    def contains(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end

    def slice(self, source: str) -> str:
        return decode_source(encode_source(source)[self.start:self.end])

    def __repr__(self) -> str:
        return f"Span({self.start}, {self.end})"


class SpannedValue(BaseModel, Generic[T]):
    """
    A decoded value paired with the span it was read from.
    """

    model_config = ConfigDict(frozen=True)

    span: Span
    content: T


SpannedString = SpannedValue[str]
SpannedShort = SpannedValue[Annotated[int, Field(ge=0, le=PORT_MAX)]]
