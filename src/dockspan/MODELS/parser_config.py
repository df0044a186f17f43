"""
Models for parser configuration.
"""
from pydantic import BaseModel

class ParserConfig(BaseModel):
    """
    Options for DockerfileParser.
    """
    # When False, directives without a dedicated builder are rejected
    allow_misc_instructions: bool = True
    encoding: str = "utf-8"
