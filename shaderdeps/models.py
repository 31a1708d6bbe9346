"""
Data models for the shader dependency builder.

This module contains the dataclass definitions used to represent shader
sources, their resolution state and the signatures of library functions.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

from shaderdeps.constants import (
    EXPORTED_RETURN_TYPE,
    BuiltinBits,
    FunctionQualifier,
    GPUType,
)


@dataclass(frozen=True)
class SourceFile:
    """Raw shader source as supplied by a loader.

    Attributes:
        filename: Logical name used in lookups and require directives
        fullpath: Path reported in diagnostics
        text: File content
    """

    filename: str
    fullpath: str
    text: str


class SourceBlock(str):
    """Text of a registered source that remembers the source it belongs to.

    Blocks compare and concatenate like plain strings. Two sources with the
    same content, even empty ones, still give distinct blocks.
    """

    filename: str

    def __new__(cls, text: str, filename: str) -> "SourceBlock":
        block = super().__new__(cls, text)
        block.filename = filename
        return block


class ResolutionState(Enum):
    """Progress of dependency resolution for one source."""

    UNRESOLVED = auto()
    RESOLVING = auto()
    RESOLVED = auto()
    FAILED = auto()


@dataclass(eq=False)
class ShaderSource:
    """One named shader source and its derived metadata.

    Attributes:
        fullpath: Path reported in diagnostics
        filename: Logical name, unique inside a registry
        raw_text: Original content
        processed_text: Rewritten content, only set when enums were rewritten
        builtins: Built-in variables referenced by the text itself
        dependencies: Logical names of all transitive dependencies, each one
            listed after everything it depends on
        state: Dependency resolution progress
    """

    fullpath: str
    filename: str
    raw_text: str
    processed_text: str | None = None
    builtins: BuiltinBits = BuiltinBits.NONE
    dependencies: list[str] = field(default_factory=list)
    state: ResolutionState = ResolutionState.UNRESOLVED
    _block: SourceBlock | None = field(default=None, init=False, repr=False)

    @property
    def text(self) -> str:
        """Effective text seen by every downstream consumer."""
        if self.processed_text is not None:
            return self.processed_text
        return self.raw_text

    @property
    def block(self) -> SourceBlock:
        """Effective text tagged with the source name, handed out by queries.

        Created on first access, after preprocessing has set the text.
        """
        if self._block is None:
            self._block = SourceBlock(self.text, self.filename)
        return self._block

    @property
    def resolved(self) -> bool:
        return self.state is ResolutionState.RESOLVED

    def add_dependencies(self, names: Iterable[str]) -> None:
        """Append names not listed yet, skipping the source itself."""
        known = set(self.dependencies)
        known.add(self.filename)
        for name in names:
            if name not in known:
                known.add(name)
                self.dependencies.append(name)


@dataclass(frozen=True)
class FunctionParameter:
    """Parameter of a library function.

    Attributes:
        qualifier: Storage qualifier, `IN` when omitted
        type: Parameter type, `GPUType.NONE` when the keyword is unknown
        name: Parameter name as written in the source
    """

    qualifier: FunctionQualifier
    type: GPUType
    name: str


@dataclass
class FunctionSignature:
    """Function declared by a material library.

    Attributes:
        name: Function name, unique across all sources
        source: Logical name of the source declaring the function
        return_type: Declared return type, only `void` functions are exported
        parameters: Parameters in declaration order, left empty for functions
            that are not exported
    """

    name: str
    source: str
    return_type: str = EXPORTED_RETURN_TYPE
    parameters: list[FunctionParameter] = field(default_factory=list)

    @property
    def exported(self) -> bool:
        return self.return_type == EXPORTED_RETURN_TYPE

    def __str__(self) -> str:
        params = ", ".join(
            f"{p.qualifier.name.lower()} {p.type.name.lower()} {p.name}"
            for p in self.parameters
        )
        return f"{self.return_type} {self.name}({params})"
