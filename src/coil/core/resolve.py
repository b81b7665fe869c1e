"""Binding of code blocks to configured output files by metadata key"""

import logging

from coil.core.models import (
    CodeBlock, CoilConfig, Diagnostic, DiagnosticKind, ResolvedEmission,
)


logger = logging.getLogger(__name__)


def _unmatched_block(block: CodeBlock) -> Diagnostic:
    if block.meta is None:
        label = f"{block.fence.value} block" + (f" ({block.lang})" if block.lang else "")
        message = f"{label} has no binding key"
    else:
        message = f"block '{block.meta}' has no entry in coil.files"
    return Diagnostic(kind=DiagnosticKind.unmatched_block, message=message, key=block.meta, line=block.line)


def resolve(
    blocks: list[CodeBlock],
    config: CoilConfig,
    ) -> tuple[list[ResolvedEmission], list[Diagnostic]]:
    """Match blocks to coil.files entries by meta key.

    Each key binds at most one block; the first block in document order wins.
    Unbound blocks and unused keys are reported, never fatal.
    """
    emissions: list[ResolvedEmission] = []
    diagnostics: list[Diagnostic] = []
    consumed: dict[str, CodeBlock] = {}

    for block in blocks:
        key = block.meta
        if key is None or key not in config.files:
            diagnostics.append(_unmatched_block(block))
            continue

        if key in consumed:
            first = consumed[key]
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.duplicate_binding,
                message=f"block '{key}' is already bound"
                        + (f" by the block at line {first.line}" if first.line else ""),
                key=key,
                path=config.files[key],
                line=block.line,
            ))
            continue

        consumed[key] = block
        emissions.append(ResolvedEmission(
            key=key,
            path=config.files[key],
            content=block.content,
            options=config.options.model_copy(),
            line=block.line,
        ))

    for key, path in config.files.items():
        if key not in consumed:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.unmatched_mapping,
                message=f"coil.files entry '{key}' ({path}) has no matching code block",
                key=key,
                path=path,
            ))

    logger.debug("Resolved %d emission(s), %d diagnostic(s)", len(emissions), len(diagnostics))
    return emissions, diagnostics
