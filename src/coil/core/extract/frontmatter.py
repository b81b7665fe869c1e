"""Frontmatter lookup and YAML decoding into a typed CoilConfig"""

import logging
from typing import Optional

import yaml
from pydantic import ValidationError

from coil.core.errors import ConfigParseError, ConfigSchemaError, MissingFrontmatter
from coil.core.models import CoilConfig, Document, Frontmatter, FrontmatterBlock


logger = logging.getLogger(__name__)


def extract_frontmatter(doc: Document) -> FrontmatterBlock:
    """Return the frontmatter block, which must be the document's first child."""
    first = doc.children[0] if doc.children else None
    if not isinstance(first, FrontmatterBlock):
        found = f"'{first.kind}' block" if first is not None else "an empty document"
        raise MissingFrontmatter(f"Document must start with a '---' frontmatter block, found {found}")
    return first


def _field_path(loc: tuple) -> str:
    """Dotted field path from a pydantic error location, without dict-key markers."""
    return ".".join(str(part) for part in loc if part != "[key]")


def decode_config(raw: str, first_line: Optional[int] = None) -> CoilConfig:
    """Decode frontmatter YAML into a CoilConfig.

    first_line is the document line of the first YAML line; when given,
    YAML error lines are reported as document lines. Missing fields are
    errors, never defaults.
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = None
        if mark is not None:
            line = mark.line + (first_line if first_line is not None else 1)
        problem = getattr(e, "problem", None) or str(e)
        raise ConfigParseError(line, problem) from e

    if not isinstance(data, dict):
        raise ConfigSchemaError("coil", f"expected a mapping with a 'coil' key, got {type(data).__name__}")

    try:
        config = Frontmatter.model_validate(data).coil
    except ValidationError as e:
        err = e.errors()[0]
        raise ConfigSchemaError(_field_path(err["loc"]), err["msg"]) from e

    logger.debug("Decoded config: keep_indentation=%s, %d file binding(s)",
                 config.options.keep_indentation, len(config.files))
    return config
