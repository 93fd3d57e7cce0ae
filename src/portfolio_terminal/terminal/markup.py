"""
The small inline markup allowed in output lines.

Only <b>, <strong>, <i>, <em>, <u> and <code> are interpreted, plus HTML
entities. Any other tag is kept as literal text, and nothing in a line is
ever handed to rich's own markup parser.
"""

import html
import re
from typing import List

from rich.style import Style
from rich.text import Text

TAG_RE = re.compile(r"<(/?)(b|strong|i|em|u|code)\s*>", re.IGNORECASE)

TAG_STYLES = {
    "b": Style(bold=True),
    "strong": Style(bold=True),
    "i": Style(italic=True),
    "em": Style(italic=True),
    "u": Style(underline=True),
    "code": Style(bold=True, color="cyan"),
}


def render_markup(line: str) -> Text:
    """Convert a line into styled rich Text."""
    text = Text()
    stack: List[str] = []
    position = 0
    for match in TAG_RE.finditer(line):
        if match.start() > position:
            text.append(html.unescape(line[position : match.start()]), _style(stack))
        closing, tag = match.group(1), match.group(2).lower()
        if closing:
            if tag in stack:
                # pop back to the matching open tag
                index = len(stack) - 1 - stack[::-1].index(tag)
                del stack[index:]
        else:
            stack.append(tag)
        position = match.end()
    if position < len(line):
        text.append(html.unescape(line[position:]), _style(stack))
    return text


def _style(stack: List[str]) -> Style:
    if not stack:
        return Style.null()
    return Style.combine([TAG_STYLES[tag] for tag in stack])


def plain_text(line: str) -> str:
    """The visible characters of a line, without markup."""
    return html.unescape(TAG_RE.sub("", line))
