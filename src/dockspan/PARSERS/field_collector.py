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
The child walk shared by every instruction builder, and the value decoders it
dispatches to.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from ..MODELS.parse_node import ParseNode, Rule
from ..MODELS.span import PORT_MAX, Span, SpannedShort, SpannedString
from ..UTILS.string_decoding import StringDecoder
from .errors import MissingFieldError, UnexpectedTokenError, ValueDecodeError

LOGGER = logging.getLogger(__name__)


def parse_string(node: ParseNode) -> SpannedString:
    """Decodes a possibly quoted or escaped string token."""
    span = Span.from_node(node)
    try:
        content = StringDecoder.decode(node.text)
    except ValueError as e:
        raise ValueDecodeError(span, node.text, str(e)) from e
    return SpannedString(span=span, content=content)


def parse_raw(node: ParseNode) -> SpannedString:
    """Keeps the token text verbatim."""
    return SpannedString(span=Span.from_node(node), content=node.text)


def parse_empty(node: ParseNode) -> SpannedString:
    """An empty string placed right after the token, for a value left blank."""
    return SpannedString(span=Span.new(node.end, node.end), content="")


def parse_short(node: ParseNode) -> SpannedShort:
    """Decodes an unsigned 16-bit integer token."""
    span = Span.from_node(node)
    try:
        content = StringDecoder.parse_port(node.text, PORT_MAX)
    except ValueError as e:
        raise ValueDecodeError(span, node.text, str(e)) from e
    return SpannedShort(span=span, content=content)


@dataclass(frozen=True)
class FieldSpec:
    """
    How one child rule maps onto a record field.
    """

    name: str
    decode: Callable[[ParseNode], Any]
    repeated: bool = False


class FieldCollector:
    """
    Walks the immediate children of a node once, decoding each child whose rule
    is in the field table and failing on the first one that is not.
    """

    def __init__(
        self,
        instruction: str,
        fields: Dict[Rule, FieldSpec],
        required: Sequence[str] = (),
        messages: Optional[Dict[str, str]] = None,
    ):
        """
        Initializes the collector.

        :param instruction: Instruction name used in error messages.
        :param fields: Field specs keyed by the child rule they consume.
        :param required: Names of the fields that must be set after the walk.
        :param messages: Optional custom messages for missing required fields.
        """
        self.instruction = instruction
        self.fields = fields
        self.required = tuple(required)
        self.messages = messages or {}

    def collect(self, node: ParseNode) -> Dict[str, Any]:
        """
        Collects the field values of a node.

        Repeated fields are lists in document order. A single-valued field that
        occurs more than once keeps its last occurrence. Optional fields that
        never occurred are left out of the result.

        :param node: The node whose children to walk.
        :return: Field values keyed by field name.
        :raises UnexpectedTokenError: On a child whose rule is not in the table.
        :raises MissingFieldError: If a required field was never set.
        :raises ValueDecodeError: If a child could not be decoded.
        """
        values: Dict[str, Any] = {spec.name: [] for spec in self.fields.values() if spec.repeated}

        for child in node.children:
            spec = self.fields.get(child.rule)
            if spec is None:
                raise UnexpectedTokenError(child, self.instruction)
            value = spec.decode(child)
            if spec.repeated:
                values[spec.name].append(value)
            else:
                values[spec.name] = value

        for name in self.required:
            value = values.get(name)
            if value is None or (isinstance(value, list) and not value):
                raise MissingFieldError(self.instruction, name, self.messages.get(name))

        LOGGER.debug("Collected %s fields %s from %d..%d", self.instruction, sorted(values), node.start, node.end)
        return values
