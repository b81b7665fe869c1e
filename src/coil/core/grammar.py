"""Restricted markdown-it grammar: frontmatter and code constructs only"""

from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock


FRONTMATTER_FENCE = "---"


@dataclass(frozen=True)
class GrammarProfile:
    """A named set of markdown-it rules enabled on top of the "zero" preset.

    The "zero" preset only knows paragraphs and plain text, so everything not
    listed here is never recognized as structure and parses as prose.
    """
    name: str
    block_rules: tuple[str, ...]
    inline_rules: tuple[str, ...] = ()
    frontmatter: bool = False


FRONTMATTER_AND_CODE = GrammarProfile(
    name="frontmatter+code",
    block_rules=("fence", "code"),
    inline_rules=("backticks", "entity"),
    frontmatter=True,
)


def _line_text(state: StateBlock, line: int) -> str:
    return state.src[state.bMarks[line] + state.tShift[line]:state.eMarks[line]]


def _is_fence(state: StateBlock, line: int) -> bool:
    return state.tShift[line] == 0 and _line_text(state, line).rstrip() == FRONTMATTER_FENCE


def frontmatter_rule(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """Match a `---` delimited block on the first line of the document.

    An opening fence without a closing one is left for the other rules.
    """
    if startLine != 0 or not _is_fence(state, startLine):
        return False

    nextLine = startLine + 1
    while nextLine < endLine and not _is_fence(state, nextLine):
        nextLine += 1
    if nextLine >= endLine:
        return False

    if silent:
        return True

    token = state.push("front_matter", "", 0)
    token.hidden = True
    token.markup = FRONTMATTER_FENCE
    token.content = state.src[state.bMarks[startLine + 1]:state.bMarks[nextLine]]
    token.map = [startLine, nextLine + 1]
    state.line = nextLine + 1
    return True


def make_parser(profile: GrammarProfile = FRONTMATTER_AND_CODE) -> MarkdownIt:
    """Build a MarkdownIt instance for the given grammar profile."""
    md = MarkdownIt("zero")
    if profile.frontmatter:
        md.block.ruler.before("table", "front_matter", frontmatter_rule)
    md.enable(list(profile.block_rules) + list(profile.inline_rules))
    return md
