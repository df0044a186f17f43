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
Errors raised while turning parse trees into instructions.
"""
from typing import Optional, Tuple

from ..MODELS.parse_node import ParseNode
from ..MODELS.span import Span, decode_source, encode_source


def line_and_column(source: str, offset: int) -> Tuple[int, int]:
    """
    Converts a byte offset into a 1-based (line, column) pair, the column
    counted in characters.
    """
    data = encode_source(source)
    line_start = data.rfind(b"\n", 0, offset) + 1
    line = data.count(b"\n", 0, offset) + 1
    column = len(decode_source(data[line_start:offset])) + 1
    return line, column


class DockerfileParseError(Exception):
    """Base class for all errors raised while building the instruction AST"""


class UnexpectedTokenError(DockerfileParseError):
    """
    A builder met a child node whose rule it does not handle.
    """

    def __init__(self, node: ParseNode, instruction: Optional[str] = None) -> None:
        self.node = node
        self.instruction = instruction
        if instruction is None:
            msg = "unexpected token %s %r" % (node.rule.value, node.text)
        else:
            msg = "unexpected token %s %r in %s instruction" % (node.rule.value, node.text, instruction)
        super().__init__(msg)

    @property
    def span(self) -> Span:
        return Span.from_node(self.node)

    def render(self, source: str) -> str:
        """
        Renders a diagnostic pointing at the offending token.

        :param source: The text the node was parsed from.
        :return: A message, the offending line and a caret marker under the token.
        """
        data = encode_source(source)
        line, column = line_and_column(source, self.node.start)
        line_start = data.rfind(b"\n", 0, self.node.start) + 1
        line_end = data.find(b"\n", line_start)
        if line_end == -1:
            line_end = len(data)
        marked = decode_source(data[self.node.start:min(self.node.end, line_end)])
        width = max(1, len(marked))
        return "line %d, column %d: %s\n%s\n%s" % (
            line,
            column,
            self,
            decode_source(data[line_start:line_end]),
            " " * (column - 1) + "^" * width,
        )


class MissingFieldError(DockerfileParseError):
    """
    A builder finished its walk without seeing a mandatory field.
    """

    def __init__(self, instruction: str, field: str, message: Optional[str] = None) -> None:
        self.instruction = instruction
        self.field = field
        if message is None:
            message = "%s instruction requires a %s" % (instruction, field)
        super().__init__(message)


class ValueDecodeError(DockerfileParseError):
    """
    A token could not be decoded into its target type.
    """

    def __init__(self, span: Span, value: str, message: str) -> None:
        self.span = span
        self.value = value
        super().__init__("invalid value %r at %d..%d: %s" % (value, span.start, span.end, message))


class ConversionError(DockerfileParseError):
    """
    An instruction was narrowed to a variant it does not hold.
    """

    def __init__(self, actual: str, requested: str) -> None:
        self.actual = actual
        self.requested = requested
        super().__init__("cannot convert %s into %s" % (actual, requested))


class DockerfileSyntaxError(DockerfileParseError):
    """
    The grammar rejected the input before any instruction could be built.
    """

    def __init__(self, message: str, line: int = -1, column: int = -1, offset: int = -1) -> None:
        self.line = line
        self.column = column
        self.offset = offset
        if line > 0:
            message = "Syntax error at line %d, column %d: %s" % (line, column, message)
        else:
            message = "Syntax error: %s" % message
        super().__init__(message)
