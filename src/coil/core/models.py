"""Data models for the parse, resolve, and emit pipeline"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool, StrictStr


class CodeKind(str, Enum):
    """How a code block was delimited in the source document"""
    fenced = "fenced"
    indented = "indented"


class FrontmatterBlock(BaseModel):
    """Raw YAML payload of the leading frontmatter block (not yet decoded)."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["frontmatter"] = "frontmatter"
    raw: str
    line: Optional[int] = None      # 1-based line of the opening fence


class CodeBlock(BaseModel):
    """A verbatim code region; meta is the binding key after the fence language."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["code"] = "code"
    content: str
    lang: Optional[str] = None
    meta: Optional[str] = None
    fence: CodeKind = CodeKind.fenced
    line: Optional[int] = None


class OtherBlock(BaseModel):
    """Any construct outside the restricted grammar (prose); ignored downstream."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["other"] = "other"
    type: str
    line: Optional[int] = None


Block = Annotated[Union[FrontmatterBlock, CodeBlock, OtherBlock], Field(discriminator="kind")]


class Document(BaseModel):
    """Parsed tree root: the ordered top-level blocks of one document."""
    model_config = ConfigDict(frozen=True)
    children: tuple[Block, ...] = ()


class CoilOptions(BaseModel):
    keep_indentation: StrictBool = Field(
        ...,
        validation_alias=AliasChoices("keep_indentation", "keep_indention"),
        description="Write code blocks verbatim instead of stripping common indentation",
    )


class CoilConfig(BaseModel):
    """The `coil` section of the frontmatter."""
    options: CoilOptions
    files: dict[StrictStr, StrictStr] = Field(..., description="Binding key -> output path relative to the output root")


class ResolvedEmission(BaseModel):
    """One code block bound to one `files` entry, ready to be written."""
    model_config = ConfigDict(frozen=True)
    key: str
    path: str
    content: str
    options: CoilOptions
    line: Optional[int] = None


class DiagnosticKind(str, Enum):
    """Recoverable conditions reported alongside successful output"""
    duplicate_binding = "duplicate_binding"
    unmatched_block = "unmatched_block"
    unmatched_mapping = "unmatched_mapping"
    path_escape = "path_escape"
    io_error = "io_error"
    duplicate_target = "duplicate_target"


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: DiagnosticKind
    message: str
    key: Optional[str] = None
    path: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line is not None else ""
        return f"{self.kind.value}: {where}{self.message}"


class EmitStatus(str, Enum):
    created = "created"
    updated = "updated"
    unchanged = "unchanged"


class EmitResult(BaseModel):
    key: str
    path: Path          # absolute target inside the output root
    status: EmitStatus


class Frontmatter(BaseModel):
    """Top-level frontmatter document; only the `coil` key is read."""
    coil: CoilConfig
