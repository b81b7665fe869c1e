"""Document parsing: markdown-it syntax tree to typed top-level blocks"""

import logging
from typing import Optional

from markdown_it.tree import SyntaxTreeNode

from coil.core.errors import GrammarViolation
from coil.core.grammar import FRONTMATTER_AND_CODE, GrammarProfile, make_parser
from coil.core.models import Block, CodeBlock, CodeKind, Document, FrontmatterBlock, OtherBlock


logger = logging.getLogger(__name__)

CODE_NODE_KINDS: dict[str, CodeKind] = {
    'fence':      CodeKind.fenced,
    'code_block': CodeKind.indented,
}


def _line(node: SyntaxTreeNode) -> Optional[int]:
    """1-based source line where the node starts, if markdown-it mapped it."""
    return node.map[0] + 1 if node.map else None


def split_info(info: str) -> tuple[Optional[str], Optional[str]]:
    """Split a fence info string into (lang, meta); meta is everything after the first word."""
    parts = info.strip().split(maxsplit=1)
    if not parts:
        return None, None
    meta = parts[1].strip() if len(parts) == 2 else None
    return parts[0], meta or None


def _to_block(node: SyntaxTreeNode) -> Block:
    if node.type == 'front_matter':
        return FrontmatterBlock(raw=node.content, line=_line(node))
    if node.type in CODE_NODE_KINDS:
        lang, meta = split_info(node.info) if node.type == 'fence' else (None, None)
        return CodeBlock(
            content=node.content,
            lang=lang,
            meta=meta,
            fence=CODE_NODE_KINDS[node.type],
            line=_line(node),
        )
    return OtherBlock(type=node.type, line=_line(node))


def parse(text: str, profile: GrammarProfile = FRONTMATTER_AND_CODE) -> Document:
    """Parse raw document text into a Document of top-level blocks."""
    tree = SyntaxTreeNode(make_parser(profile).parse(text))
    if tree.type != 'root':
        raise GrammarViolation(f"Expected a document root, got '{tree.type}'")

    doc = Document(children=tuple(_to_block(child) for child in tree.children))
    logger.debug("Parsed %d top-level block(s) with the '%s' grammar", len(doc.children), profile.name)
    return doc
