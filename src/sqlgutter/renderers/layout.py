"""
Layout helpers shared by the renderers
"""

from typing import List


def indent_block(text: str, width: int) -> str:
    """Shift every non-empty line of text right by width columns."""
    prefix = " " * width
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


def gutter(keyword: str, width: int) -> str:
    """Right-align a keyword so it ends at the gutter column."""
    return keyword.rjust(width)


def comma_lines(items: List[str], width: int) -> List[str]:
    """Continuation lines of a list: ', item' with the comma one column left of the gutter edge."""
    prefix = " " * max(width - 1, 0) + ", "
    return [prefix + item for item in items]


def last_line(text: str) -> str:
    return text.rsplit("\n", 1)[-1]
