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
Models for the Dockerfile Abstract Syntax Tree.
"""
from typing import Annotated, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel

from ..PARSERS.errors import ConversionError
from .span import Span, SpannedShort, SpannedString


class FromInstruction(BaseModel):
    """
    https://docs.docker.com/reference/dockerfile/#from
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["from"] = "from"
    span: Span
    flags: List[SpannedString] = []
    image: SpannedString
    alias: Optional[SpannedString] = None


class ArgInstruction(BaseModel):
    """
    https://docs.docker.com/reference/dockerfile/#arg
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["arg"] = "arg"
    span: Span
    name: SpannedString
    value: Optional[SpannedString] = None


class ExposePort(BaseModel):
    """
    One ``port[/protocol]`` token of an EXPOSE instruction.
    """

    model_config = ConfigDict(frozen=True)

    span: Span
    port: SpannedShort
    protocol: Optional[SpannedString] = None


class ExposeInstruction(BaseModel):
    """
    https://docs.docker.com/reference/dockerfile/#expose
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["expose"] = "expose"
    span: Span
    vars: List[ExposePort] = Field(min_length=1)


class UserInstruction(BaseModel):
    """
    https://docs.docker.com/reference/dockerfile/#user
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    span: Span
    user: SpannedString
    group: Optional[SpannedString] = None


class WorkdirInstruction(BaseModel):
    """
    https://docs.docker.com/reference/dockerfile/#workdir
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["workdir"] = "workdir"
    span: Span
    workdir: SpannedString


class MiscInstruction(BaseModel):
    """
    Any directive without a dedicated model, e.g. RUN, CMD or COPY.
    The arguments are kept verbatim, line continuations included.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["misc"] = "misc"
    span: Span
    instruction: SpannedString
    arguments: Optional[SpannedString] = None


InstructionRecord = Union[
    FromInstruction,
    ArgInstruction,
    ExposeInstruction,
    UserInstruction,
    WorkdirInstruction,
    MiscInstruction,
]

R = TypeVar("R", bound=BaseModel)


class Instruction(RootModel[Annotated[InstructionRecord, Field(discriminator="kind")]]):
    """
    A single Dockerfile instruction: exactly one of the instruction records.
    """

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> str:
        return self.root.kind

    @property
    def span(self) -> Span:
        return self.root.span

    def into(self, variant: Type[R]) -> R:
        """
        Narrows this instruction to one of its variants.

        :param variant: The record class to narrow to, e.g. ExposeInstruction.
        :return: The wrapped record, unchanged.
        :raises ConversionError: If a different variant is active.
        """
        if isinstance(self.root, variant):
            return self.root
        raise ConversionError(actual=type(self.root).__name__, requested=variant.__name__)

    def try_into(self, variant: Type[R]) -> Optional[R]:
        if isinstance(self.root, variant):
            return self.root
        return None

    def into_from(self) -> Optional[FromInstruction]:
        return self.try_into(FromInstruction)

    def into_arg(self) -> Optional[ArgInstruction]:
        return self.try_into(ArgInstruction)

    def into_expose(self) -> Optional[ExposeInstruction]:
        return self.try_into(ExposeInstruction)

    def into_user(self) -> Optional[UserInstruction]:
        return self.try_into(UserInstruction)

    def into_workdir(self) -> Optional[WorkdirInstruction]:
        return self.try_into(WorkdirInstruction)

    def into_misc(self) -> Optional[MiscInstruction]:
        return self.try_into(MiscInstruction)


class DockerfileAST(BaseModel):
    """
    Represents the complete Abstract Syntax Tree of a Dockerfile.
    """

    model_config = ConfigDict(frozen=True)

    span: Span
    instructions: List[Instruction] = []

    def of_kind(self, variant: Type[R]) -> List[R]:
        """Returns the records of one variant, in source order."""
        return [i.root for i in self.instructions if isinstance(i.root, variant)]
