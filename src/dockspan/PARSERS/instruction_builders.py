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
Builders turning instruction parse nodes into typed instruction records.

Each builder only declares which child rules it understands and which of them
are mandatory; the walk itself is done by FieldCollector.
"""
from typing import Callable, Dict

from ..MODELS.dockerfile_ast import (
    ArgInstruction,
    ExposeInstruction,
    ExposePort,
    FromInstruction,
    Instruction,
    InstructionRecord,
    MiscInstruction,
    UserInstruction,
    WorkdirInstruction,
)
from ..MODELS.parse_node import ParseNode, Rule
from ..MODELS.span import Span
from .errors import UnexpectedTokenError
from .field_collector import FieldCollector, FieldSpec, parse_empty, parse_raw, parse_short, parse_string

_EXPOSE_PORT = FieldCollector(
    "expose port",
    {
        Rule.EXPOSE_PORT_NUMBER: FieldSpec("port", parse_short),
        Rule.EXPOSE_PROTOCOL: FieldSpec("protocol", parse_raw),
    },
    required=["port"],
    messages={"port": "expose port requires a port number"},
)


def build_expose_port(node: ParseNode) -> ExposePort:
    return ExposePort(span=Span.from_node(node), **_EXPOSE_PORT.collect(node))


_EXPOSE = FieldCollector(
    "expose",
    {Rule.EXPOSE_PORT: FieldSpec("vars", build_expose_port, repeated=True)},
    required=["vars"],
    messages={"vars": "expose instruction requires at least one port"},
)


def build_expose(node: ParseNode) -> ExposeInstruction:
    return ExposeInstruction(span=Span.from_node(node), **_EXPOSE.collect(node))


_USER = FieldCollector(
    "user",
    {
        Rule.USER_NAME: FieldSpec("user", parse_string),
        Rule.USER_GROUP: FieldSpec("group", parse_string),
    },
    required=["user"],
    messages={"user": "user instruction requires a username"},
)


def build_user(node: ParseNode) -> UserInstruction:
    return UserInstruction(span=Span.from_node(node), **_USER.collect(node))


_WORKDIR = FieldCollector(
    "workdir",
    {Rule.WORKDIR_PATH: FieldSpec("workdir", parse_string)},
    required=["workdir"],
    messages={"workdir": "workdir instruction requires a path"},
)


def build_workdir(node: ParseNode) -> WorkdirInstruction:
    return WorkdirInstruction(span=Span.from_node(node), **_WORKDIR.collect(node))


_FROM = FieldCollector(
    "from",
    {
        Rule.FROM_FLAG: FieldSpec("flags", parse_raw, repeated=True),
        Rule.FROM_IMAGE: FieldSpec("image", parse_raw),
        Rule.FROM_ALIAS: FieldSpec("alias", parse_raw),
    },
    required=["image"],
    messages={"image": "from instruction requires an image"},
)


def build_from(node: ParseNode) -> FromInstruction:
    return FromInstruction(span=Span.from_node(node), **_FROM.collect(node))


_ARG = FieldCollector(
    "arg",
    {
        Rule.ARG_NAME: FieldSpec("name", parse_raw),
        Rule.ARG_EQUALS: FieldSpec("value", parse_empty),
        Rule.ARG_VALUE: FieldSpec("value", parse_string),
    },
    required=["name"],
)


def build_arg(node: ParseNode) -> ArgInstruction:
    return ArgInstruction(span=Span.from_node(node), **_ARG.collect(node))


_MISC = FieldCollector(
    "misc",
    {
        Rule.MISC_NAME: FieldSpec("instruction", parse_raw),
        Rule.MISC_ARGUMENTS: FieldSpec("arguments", parse_raw),
    },
    required=["instruction"],
)


def build_misc(node: ParseNode) -> MiscInstruction:
    return MiscInstruction(span=Span.from_node(node), **_MISC.collect(node))


BUILDERS: Dict[Rule, Callable[[ParseNode], InstructionRecord]] = {
    Rule.FROM: build_from,
    Rule.ARG: build_arg,
    Rule.EXPOSE: build_expose,
    Rule.USER: build_user,
    Rule.WORKDIR: build_workdir,
    Rule.MISC: build_misc,
}


def build_instruction(node: ParseNode) -> Instruction:
    """
    Builds the instruction for a node tagged with an instruction rule.

    :param node: A complete instruction node.
    :return: The instruction, wrapped in the Instruction union.
    :raises UnexpectedTokenError: If the node is not an instruction node.
    """
    builder = BUILDERS.get(node.rule)
    if builder is None:
        raise UnexpectedTokenError(node)
    return Instruction(builder(node))
