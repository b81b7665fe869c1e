"""Top-level code block collection"""

import logging

from coil.core.models import CodeBlock, Document


logger = logging.getLogger(__name__)


def collect_code_blocks(doc: Document) -> list[CodeBlock]:
    """Return the document's top-level code blocks in document order."""
    blocks = [b for b in doc.children if isinstance(b, CodeBlock)]
    logger.debug("Blocks found: %s", [b.meta for b in blocks if b.meta])
    return blocks
