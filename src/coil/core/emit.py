"""File emission: indentation policy, output-root containment, and writes"""

import logging
from pathlib import Path

from coil.core.errors import EmitIOError, PathEscapeError
from coil.core.models import EmitResult, EmitStatus, ResolvedEmission
from coil.core.utils.paths import resolve_within
from coil.core.utils.text import strip_common_indent


logger = logging.getLogger(__name__)


def render(emission: ResolvedEmission) -> str:
    """Return the file content for an emission after the indentation policy."""
    if emission.options.keep_indentation:
        return emission.content
    return strip_common_indent(emission.content)


def target_path(emission: ResolvedEmission, output_root: Path) -> Path:
    """Resolve an emission's output path inside output_root.

    Raises PathEscapeError if the path leaves output_root, and EmitIOError
    if the OS cannot represent it (e.g. an embedded NUL byte).
    """
    try:
        target = resolve_within(Path(output_root), emission.path)
    except (OSError, ValueError) as e:
        raise EmitIOError(emission.key, emission.path, f"invalid path ({e})", emission.line) from e
    if target is None:
        raise PathEscapeError(emission.key, emission.path, emission.line)
    return target


def emit(emission: ResolvedEmission, output_root: Path, dry_run: bool = False) -> EmitResult:
    """Write one emission under output_root.

    Raises PathEscapeError before touching the filesystem if the configured
    path leaves output_root, and EmitIOError on any OS-level or encoding failure.
    Existing files are overwritten; byte-identical content is left untouched.
    """
    target = target_path(emission, output_root)
    try:
        data = render(emission).encode("utf-8")
        existing = target.read_bytes() if target.is_file() else None
        if existing == data:
            status = EmitStatus.unchanged
        else:
            status = EmitStatus.updated if target.exists() else EmitStatus.created
            if not dry_run:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
    except (OSError, ValueError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        raise EmitIOError(emission.key, emission.path, reason, emission.line) from e

    logger.debug("%s%s: %s -> %s", "[dry-run] " if dry_run else "", status.value, emission.key, target)
    return EmitResult(key=emission.key, path=target, status=status)
