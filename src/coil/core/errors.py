"""Error taxonomy: fatal document errors and per-emission errors"""

from typing import Optional

from coil.core.models import Diagnostic, DiagnosticKind


class CoilError(Exception):
    """Base class for every error raised by the extraction core."""


class GrammarViolation(CoilError):
    """The parser did not produce a document root."""


class MissingFrontmatter(CoilError):
    """The document does not start with a frontmatter block."""


class ConfigError(CoilError):
    pass


class ConfigParseError(ConfigError):
    def __init__(self, line: Optional[int], message: str):
        self.line = line
        self.message = message
        where = f" at line {line}" if line is not None else ""
        super().__init__(f"Invalid YAML frontmatter{where}: {message}")


class ConfigSchemaError(ConfigError):
    def __init__(self, field: str, message: str = "missing or wrong type"):
        self.field = field
        self.message = message
        super().__init__(f"Invalid coil configuration: {field}: {message}")


class EmitError(CoilError):
    """A single emission failed; other emissions are unaffected."""
    kind: DiagnosticKind

    def __init__(self, key: str, path: str, message: str, line: Optional[int] = None):
        self.key = key
        self.path = path
        self.line = line
        super().__init__(message)

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(kind=self.kind, message=str(self), key=self.key, path=self.path, line=self.line)


class PathEscapeError(EmitError):
    kind = DiagnosticKind.path_escape

    def __init__(self, key: str, path: str, line: Optional[int] = None):
        super().__init__(key, path, f"'{key}': path '{path}' escapes the output root", line)


class EmitIOError(EmitError):
    kind = DiagnosticKind.io_error

    def __init__(self, key: str, path: str, reason: str, line: Optional[int] = None):
        self.reason = reason
        super().__init__(key, path, f"'{key}': cannot write '{path}': {reason}", line)


class DuplicateTargetError(EmitError):
    kind = DiagnosticKind.duplicate_target

    def __init__(self, key: str, path: str, other: str, line: Optional[int] = None):
        self.other = other
        super().__init__(key, path, f"'{key}': path '{path}' is already written by '{other}'", line)
