"""
Comment model shared by every declaration.

A single comment keeps its text as a string. A run of consecutive comments
of the same kind keeps one entry per comment; once a multi-line block has
been split into lines, that entry is itself a list, so grouping is kept as
nested lists.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

CommentValue = str | list[str | list[str]]


class Comment(BaseModel):
    """
    A comment attached to a declaration.

    Attributes:
        type: ``line`` for ``//`` and ``#`` comments, ``block`` for ``/* */``
        value: Comment text without delimiters, or a run of texts
    """

    type: Literal["line", "block"]
    value: CommentValue

    def lines(self) -> list[str]:
        """Flatten the comment into text lines."""
        if isinstance(self.value, str):
            return self.value.split("\n")
        result: list[str] = []
        for item in self.value:
            if isinstance(item, str):
                result.extend(item.split("\n"))
            else:
                result.extend(item)
        return result
