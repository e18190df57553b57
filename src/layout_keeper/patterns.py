"""
Owner and window name patterns

A saved layout names windows by owner and title. Each name is either matched
exactly or, when it compiles as a regular expression, searched for as one.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Exact:
    value: str

    @property
    def literal(self) -> str:
        return self.value

    def matches(self, text: str) -> bool:
        return self.value == text


@dataclass(frozen=True)
class Wildcard:
    regex: re.Pattern

    @property
    def literal(self) -> str:
        return self.regex.pattern

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


Pattern = Exact | Wildcard


def compile_pattern(text: str | None) -> Pattern:
    """Return a Wildcard if `text` compiles as a regex, otherwise an Exact"""
    if text is None:
        return Exact("")
    text = str(text)
    try:
        return Wildcard(re.compile(text))
    except re.error:
        return Exact(text)
