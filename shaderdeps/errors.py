"""
Exceptions and diagnostics for the shader dependency builder.

Problems found while building a registry (malformed enums, unknown parameter
types, missing dependencies...) are recorded as `Diagnostic` instances so that
a single pass reports as many of them as possible. Exceptions are reserved for
conditions that stop the caller right away.
"""

from dataclasses import dataclass
from enum import Enum, auto

from shaderdeps.scanner import line_and_column, line_at


class ErrorKind(Enum):
    """Category of a build phase diagnostic."""

    MALFORMED_DIRECTIVE = auto()
    MISSING_DEPENDENCY = auto()
    CYCLIC_DEPENDENCY = auto()
    MALFORMED_ENUM_DECLARATION = auto()
    UNKNOWN_PARAMETER_TYPE = auto()
    TOO_MANY_PARAMETERS = auto()
    PROTOTYPE_IN_LIBRARY = auto()
    FUNCTION_REDEFINITION = auto()


@dataclass(frozen=True)
class Diagnostic:
    """Error located in a shader source.

    Attributes:
        kind: Error category
        path: Path of the source the error was found in
        line: 1-based line number
        column: 1-based column number
        message: Human readable description
        source_line: Content of the offending line
        previous: Related location, e.g. the first definition of a function
    """

    kind: ErrorKind
    path: str
    line: int
    column: int
    message: str
    source_line: str = ""
    previous: "Diagnostic | None" = None

    @classmethod
    def at(
        cls,
        kind: ErrorKind,
        path: str,
        text: str,
        offset: int,
        message: str,
        previous: "Diagnostic | None" = None,
    ) -> "Diagnostic":
        """Create a diagnostic pointing at `offset` inside `text`."""
        line, column = line_and_column(text, offset)
        return cls(
            kind=kind,
            path=path,
            line=line,
            column=column,
            message=message,
            source_line=line_at(text, offset),
            previous=previous,
        )

    def format(self) -> str:
        """Render the diagnostic like a compiler error.

        Examples:
            >>> print(diagnostic.format())
            shaders/a.glsl:3:19 error: Dependency not found
                3 | #pragma BLENDER_REQUIRE(b.glsl)
                  |                   ^
        """
        lines = [
            f"{self.path}:{self.line}:{self.column} error: {self.message}",
            f"{self.line:>5} | {self.source_line}",
            "      | " + " " * (self.column - 1) + "^",
        ]
        text = "\n".join(lines)
        if self.previous is not None:
            text += "\n" + self.previous.format()
        return text

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column} error: {self.message}"


class ShaderSourceError(Exception):
    """Base exception of the shader dependency builder."""


class DuplicateSourceError(ShaderSourceError):
    """Two sources were registered under the same logical name."""

    def __init__(self, filename: str, fullpath: str, previous_path: str):
        self.filename = filename
        self.fullpath = fullpath
        self.previous_path = previous_path
        super().__init__(
            f"Duplicate shader source name {filename!r}: {fullpath} "
            f"conflicts with {previous_path}"
        )


class UnknownSourceError(ShaderSourceError, KeyError):
    """A query named a source that is not registered."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Could not find {filename!r} in the list of registered sources"
        )

    def __str__(self) -> str:
        return str(self.args[0])


class RegistryStateError(ShaderSourceError):
    """The registry was used outside of its init/query/exit lifecycle."""


class RegistryInitError(ShaderSourceError):
    """Building the registry produced errors.

    Attributes:
        diagnostics: Every error reported during the build phase
    """

    def __init__(self, diagnostics: list[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__(
            f"Dependency errors detected: {len(self.diagnostics)} error(s)"
        )


class SourceLoadError(ShaderSourceError):
    """Shader sources could not be read from disk."""
