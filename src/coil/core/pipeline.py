"""Pipeline step functions: check and extract orchestration"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from coil.core.emit import emit, target_path
from coil.core.errors import DuplicateTargetError, EmitError
from coil.core.extract.blocks import collect_code_blocks
from coil.core.extract.frontmatter import decode_config, extract_frontmatter
from coil.core.models import CodeBlock, CoilConfig, Diagnostic, EmitResult, ResolvedEmission
from coil.core.parse import parse
from coil.core.resolve import resolve


logger = logging.getLogger(__name__)


@dataclass
class CheckReport:
    """Everything known about a document before any file is written."""
    config:      CoilConfig
    blocks:      list[CodeBlock]
    emissions:   list[ResolvedEmission]
    diagnostics: list[Diagnostic]


@dataclass
class ExtractResult:
    emitted:     list[EmitResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    failed:      int = 0            # emissions rejected by the emitter

    @property
    def ok(self) -> bool:
        return self.failed == 0


def run_check(text: str) -> CheckReport:
    """Parse, decode, and resolve a document. Raises on fatal document errors."""
    doc = parse(text)
    fm = extract_frontmatter(doc)
    config = decode_config(fm.raw, first_line=fm.line + 1 if fm.line is not None else None)
    blocks = collect_code_blocks(doc)
    emissions, diagnostics = resolve(blocks, config)
    return CheckReport(config=config, blocks=blocks, emissions=emissions, diagnostics=diagnostics)


def run_extract(
    text: str,
    output_root: Optional[Path] = None,
    dry_run: bool = False,
    ) -> ExtractResult:
    """Run the full pipeline and write every resolved emission under output_root.

    Fatal errors propagate before anything is written. Per-emission errors are
    added to the diagnostics and the remaining emissions still run.
    output_root defaults to the current working directory.
    """
    report = run_check(text)
    root = Path(output_root) if output_root is not None else Path.cwd()
    result = ExtractResult(diagnostics=list(report.diagnostics))
    claimed: dict[Path, str] = {}

    for emission in report.emissions:
        try:
            target = target_path(emission, root)
            if target in claimed:
                raise DuplicateTargetError(emission.key, emission.path, claimed[target], emission.line)
            claimed[target] = emission.key
            result.emitted.append(emit(emission, root, dry_run=dry_run))
        except EmitError as e:
            logger.debug("Emission failed: %s", e)
            result.diagnostics.append(e.to_diagnostic())
            result.failed += 1

    logger.debug("Emitted %d file(s) under %s, %d diagnostic(s)",
                 len(result.emitted), root, len(result.diagnostics))
    return result
