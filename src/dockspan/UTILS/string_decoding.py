"""
Utilities for decoding quoted and escaped Dockerfile strings.
"""
import re
from typing import Dict

class StringDecoder:
    """
    Decodes the string forms used in instruction arguments.
    Supports "double quoted" strings with backslash escapes and bare words where
    a backslash escapes the next character.
    """
    QUOTED_ESCAPES: Dict[str, str] = {
        '"': '"',
        "'": "'",
        "\\": "\\",
        "/": "/",
        "n": "\n",
        "r": "\r",
        "t": "\t",
        "0": "\0",
        "$": "$",
    }

    # A backslash-newline, with the blank and comment lines it joins over
    LINE_CONTINUATION = r"\\[ \t]*\r?\n(?:[ \t]*(?:#[^\n]*)?\r?\n)*"

    @staticmethod
    def decode(text: str) -> str:
        """
        Decodes a token that may or may not be quoted.

        :param text: The raw token text.
        :return: The decoded string.
        :raises ValueError: On an unterminated quote or an invalid escape.
        """
        if text.startswith('"'):
            return StringDecoder.unquote(text)
        return StringDecoder.unescape(text)

    @staticmethod
    def unquote(text: str) -> str:
        """
        Strips the surrounding double quotes and decodes escapes.

        :param text: The raw token text, quotes included.
        :return: The decoded string.
        :raises ValueError: On an unterminated quote or an invalid escape.
        """
        if len(text) < 2 or not text.startswith('"') or not text.endswith('"'):
            raise ValueError("unterminated quoted string")

        body = text[1:-1]
        # Group 1: escaped character, absent for a trailing lone backslash
        pattern = r'\\(.)?|"'

        def replace(match):
            """
            Internal replacement function for re.sub.
            """
            if match.group(0) == '"':
                raise ValueError("unescaped quote inside quoted string")
            escaped = match.group(1)
            if escaped is None:
                raise ValueError("dangling escape at end of string")
            if escaped not in StringDecoder.QUOTED_ESCAPES:
                raise ValueError(f"invalid escape sequence '\\{escaped}'")
            return StringDecoder.QUOTED_ESCAPES[escaped]

        return re.sub(pattern, replace, body, flags=re.DOTALL)

    @staticmethod
    def unescape(text: str) -> str:
        """
        Decodes a bare word: line continuations, and the comment lines they
        join over, are dropped and any other backslash keeps the character
        that follows it.

        :param text: The raw token text.
        :return: The decoded string.
        """
        text = re.sub(StringDecoder.LINE_CONTINUATION, "", text)
        return re.sub(r'\\(.)', r'\1', text)

    @staticmethod
    def parse_port(text: str, maximum: int) -> int:
        """
        Parses a decimal port number.

        :param text: The digits.
        :param maximum: The largest accepted value.
        :return: The port.
        :raises ValueError: If the text is not a number or is out of range.
        """
        if not (text.isascii() and text.isdigit()):
            raise ValueError("port must be a decimal number")
        port = int(text)
        if port > maximum:
            raise ValueError(f"port must be at most {maximum}")
        return port
