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
Parsers for Dockerfiles, producing span-annotated instructions.
"""
import logging
import os
from typing import Optional

from lark import Lark, UnexpectedEOF, UnexpectedInput

from ..MODELS.dockerfile_ast import DockerfileAST, Instruction
from ..MODELS.parse_node import ParseNode, Rule
from ..MODELS.parser_config import ParserConfig
from ..MODELS.span import Span, encode_source
from .errors import DockerfileSyntaxError, UnexpectedTokenError
from .instruction_builders import BUILDERS, build_instruction

LOGGER = logging.getLogger(__name__)

_GRAMMAR_FILE = os.path.join(os.path.dirname(__file__), "dockerfile.lark")

INSTRUCTION_RULES = tuple(BUILDERS)


def _load_grammar() -> str:
    with open(_GRAMMAR_FILE, encoding="utf-8") as f:
        return f.read()


class DockerfileParser:
    """
    Parser for Dockerfile instructions.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        """
        Initializes the parser and compiles the grammar.

        :param config: Parser options, defaults to ParserConfig().
        """
        self.config = config or ParserConfig()
        self._lark = Lark(
            _load_grammar(),
            parser="lalr",
            start=[Rule.DOCKERFILE.value] + [rule.value for rule in INSTRUCTION_RULES],
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse(self, dockerfile_path: str) -> DockerfileAST:
        """
        Parses a Dockerfile from a file path.

        :param dockerfile_path: Path to the Dockerfile.
        :return: The parsed AST.
        """
        with open(dockerfile_path, 'r', encoding=self.config.encoding) as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> DockerfileAST:
        """
        Parses a whole Dockerfile from a string.

        :param content: Content of the Dockerfile.
        :return: The parsed AST, instructions in source order.
        :raises DockerfileSyntaxError: If the grammar rejects the content.
        :raises DockerfileParseError: If an instruction cannot be built.
        """
        root = self.parse_tree(content, Rule.DOCKERFILE)

        instructions = []
        for node in root.children:
            if node.rule == Rule.MISC and not self.config.allow_misc_instructions:
                raise UnexpectedTokenError(node.children[0])
            instructions.append(build_instruction(node))

        size = len(encode_source(content))
        LOGGER.debug("Parsed %d instructions from %d bytes", len(instructions), size)
        return DockerfileAST(span=Span.new(0, size), instructions=instructions)

    def parse_single(self, content: str, rule: Rule) -> Instruction:
        """
        Parses content holding exactly one instruction of the given kind.

        :param content: The instruction text.
        :param rule: The instruction rule, e.g. Rule.EXPOSE.
        :return: The parsed instruction.
        """
        if rule not in BUILDERS:
            raise ValueError(f"{rule.value} is not an instruction rule")
        return build_instruction(self.parse_tree(content, rule))

    def parse_tree(self, content: str, rule: Rule = Rule.DOCKERFILE) -> ParseNode:
        """
        Runs the grammar and returns the generic parse tree.

        :param content: The text to parse.
        :param rule: The start rule.
        :return: The root node.
        :raises DockerfileSyntaxError: If the grammar rejects the content.
        """
        try:
            tree = self._lark.parse(content, start=rule.value)
        except UnexpectedEOF as e:
            raise DockerfileSyntaxError("unexpected end of input, expected one of %s" % sorted(e.expected)) from e
        except UnexpectedInput as e:
            offset = -1 if e.pos_in_stream is None else len(encode_source(content[:e.pos_in_stream]))
            raise DockerfileSyntaxError(
                "unexpected input\n%s" % e.get_context(content).rstrip("\n"),
                line=e.line,
                column=e.column,
                offset=offset,
            ) from e
        return ParseNode.from_lark(tree, content)


_default_parser: Optional[DockerfileParser] = None


def _get_default_parser() -> DockerfileParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = DockerfileParser()
    return _default_parser


def parse_single(content: str, rule: Rule) -> Instruction:
    """Parses one instruction with a shared default parser."""
    return _get_default_parser().parse_single(content, rule)


def parse_dockerfile(content: str) -> DockerfileAST:
    """Parses a Dockerfile string with a shared default parser."""
    return _get_default_parser().parse_from_string(content)
