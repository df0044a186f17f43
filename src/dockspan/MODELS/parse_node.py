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
Generic parse tree nodes handed to the instruction builders by the grammar layer.
"""
from dataclasses import dataclass
from enum import Enum
from itertools import accumulate
from typing import List, Optional, Tuple, Union

from lark import Token, Tree

from .span import encode_source


class Rule(str, Enum):
    """
    Syntactic categories produced by the Dockerfile grammar.
    """

    DOCKERFILE = "dockerfile"

    FROM = "from"
    FROM_FLAG = "from_flag"
    FROM_IMAGE = "from_image"
    FROM_ALIAS = "from_alias"

    ARG = "arg"
    ARG_NAME = "arg_name"
    ARG_EQUALS = "arg_equals"
    ARG_VALUE = "arg_value"

    EXPOSE = "expose"
    EXPOSE_PORT = "expose_port"
    EXPOSE_PORT_NUMBER = "expose_port_number"
    EXPOSE_PROTOCOL = "expose_protocol"

    USER = "user"
    USER_NAME = "user_name"
    USER_GROUP = "user_group"

    WORKDIR = "workdir"
    WORKDIR_PATH = "workdir_path"

    MISC = "misc"
    MISC_NAME = "misc_name"
    MISC_ARGUMENTS = "misc_arguments"


@dataclass(frozen=True)
class ParseNode:
    """
    A tagged node of the parse tree: rule tag, matched text, offsets and children.
    """

    rule: Rule
    text: str
    start: int
    end: int
    children: Tuple["ParseNode", ...] = ()

    @classmethod
    def from_lark(
        cls, item: Union[Tree, Token], source: str, offsets: Optional[List[int]] = None
    ) -> "ParseNode":
        """
        Converts a lark tree or token into a ParseNode.

        Terminal names are lower-cased so tokens and rules share one tag space.
        lark reports character positions; they are translated to UTF-8 byte
        offsets.

        :param item: The lark tree or token, parsed with propagate_positions.
        :param source: The text the tree was parsed from.
        :param offsets: Byte offset of every character position of source,
            computed once for the whole tree when omitted.
        :return: The equivalent ParseNode tree.
        """
        if offsets is None:
            offsets = byte_offsets(source)

        if isinstance(item, Token):
            return cls(
                rule=Rule(item.type.lower()),
                text=str(item),
                start=offsets[item.start_pos],
                end=offsets[item.end_pos],
            )

        if item.meta.empty:
            start = end = 0
        else:
            start, end = item.meta.start_pos, item.meta.end_pos
        return cls(
            rule=Rule(str(item.data)),
            text=source[start:end],
            start=offsets[start],
            end=offsets[end],
            children=tuple(cls.from_lark(child, source, offsets) for child in item.children),
        )


def byte_offsets(source: str) -> List[int]:
    """
    Maps each character position of source, end included, to its UTF-8 byte offset.
    """
    return [0] + list(accumulate(len(encode_source(char)) for char in source))
