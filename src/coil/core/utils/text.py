"""Whitespace utilities for emitted code"""

import textwrap


def strip_common_indent(content: str) -> str:
    """Remove the leading whitespace shared by every non-blank line."""
    return textwrap.dedent(content)
