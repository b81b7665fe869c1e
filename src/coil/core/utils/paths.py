"""Output path containment checks"""

from pathlib import Path
from typing import Optional


def resolve_within(root: Path, relative: str) -> Optional[Path]:
    """Return root/relative resolved, or None if it is not strictly inside root.

    Parent segments, absolute paths and symlinks are all resolved before the
    check, so any of them pointing outside root is rejected.
    """
    base = root.resolve()
    target = (base / relative).resolve()
    if target == base or not target.is_relative_to(base):
        return None
    return target
