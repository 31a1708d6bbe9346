"""
Require directive resolution.

Sources declare their dependencies with `#pragma BLENDER_REQUIRE(name)`. The
resolver turns that graph into a flat list per source where every dependency
appears after everything it depends on, so the texts can be concatenated into
a single compilation unit.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from loguru import logger

from shaderdeps.constants import REQUIRE_DIRECTIVE, BuiltinBits
from shaderdeps.errors import Diagnostic, ErrorKind
from shaderdeps.models import ResolutionState, ShaderSource
from shaderdeps.scanner import NOT_FOUND


@dataclass
class _Frame:
    """A source being resolved and how far its directives were read."""

    source: ShaderSource
    pos: int = NOT_FOUND
    pending: ShaderSource | None = None


class DependencyResolver:
    """Resolves require directives into ordered dependency lists."""

    def __init__(
        self,
        sources: Mapping[str, ShaderSource],
        directive: str = REQUIRE_DIRECTIVE,
    ) -> None:
        """Initialize with the registered sources.

        Args:
            sources: Sources keyed by logical name
            directive: Text opening a require directive
        """
        self.sources = sources
        self.directive = directive
        self.diagnostics: list[Diagnostic] = []

    def resolve_all(self) -> int:
        """Resolve every registered source.

        Returns:
            Number of sources whose resolution failed
        """
        return sum(not self.resolve(source) for source in self.sources.values())

    def resolve(self, source: ShaderSource) -> bool:
        """Resolve the dependencies of a source, dependencies first.

        The walk keeps its own stack of sources being resolved, so require
        chains of any depth are handled. Each source is processed at most
        once, later calls return the memoized outcome.

        Args:
            source: Source to resolve

        Returns:
            True on success, False if the source or one of its dependencies
            has a broken directive
        """
        if source.state is ResolutionState.RESOLVED:
            return True
        if source.state is ResolutionState.FAILED:
            return False

        source.state = ResolutionState.RESOLVING
        stack = [_Frame(source)]
        while stack:
            frame = stack[-1]
            if frame.pending is not None:
                dependency, frame.pending = frame.pending, None
                if dependency.state is not ResolutionState.RESOLVED:
                    logger.debug(
                        f"{frame.source.filename} fails because dependency "
                        f"{dependency.filename} failed"
                    )
                    self._finish(stack, success=False)
                    continue
                frame.source.add_dependencies(
                    [*dependency.dependencies, dependency.filename]
                )

            step = self._next_dependency(frame, stack)
            if isinstance(step, bool):
                self._finish(stack, success=step)
                continue

            frame.pending = step
            if step.state is ResolutionState.UNRESOLVED:
                step.state = ResolutionState.RESOLVING
                stack.append(_Frame(step))

        return source.state is ResolutionState.RESOLVED

    @staticmethod
    def _finish(stack: list[_Frame], success: bool) -> None:
        source = stack.pop().source
        if success:
            source.state = ResolutionState.RESOLVED
            logger.debug(f"Resolved {source.filename}: {source.dependencies}")
        else:
            # A failed source exposes no dependency list
            source.state = ResolutionState.FAILED
            source.dependencies.clear()

    def _error(
        self, source: ShaderSource, offset: int, kind: ErrorKind, message: str
    ) -> None:
        self.diagnostics.append(
            Diagnostic.at(kind, source.fullpath, source.text, offset, message)
        )

    def _next_dependency(
        self, frame: _Frame, stack: list[_Frame]
    ) -> ShaderSource | bool:
        """Read the next require directive of the frame's source.

        Returns:
            The required source, True once every directive was read, or
            False after recording a diagnostic
        """
        source = frame.source
        text = source.text
        frame.pos = text.find(self.directive, frame.pos + 1)
        if frame.pos == NOT_FOUND:
            return True

        start = frame.pos + len(self.directive)
        line_end = text.find("\n", start)
        if line_end == NOT_FOUND:
            line_end = len(text)
        # The closing parenthesis must be on the directive line
        end = text.find(")", start, line_end)
        if end == NOT_FOUND:
            self._error(
                source,
                start,
                ErrorKind.MALFORMED_DIRECTIVE,
                'Malformed BLENDER_REQUIRE: Missing ")" token',
            )
            return False

        name = text[start:end].strip()
        dependency = self.sources.get(name)
        if dependency is None:
            self._error(
                source, start, ErrorKind.MISSING_DEPENDENCY, "Dependency not found"
            )
            return False

        if dependency.state is ResolutionState.RESOLVING:
            chain = [f.source.filename for f in stack]
            cycle = chain[chain.index(name) :] + [name]
            self._error(
                source,
                start,
                ErrorKind.CYCLIC_DEPENDENCY,
                f"Circular dependency: {' -> '.join(cycle)}",
            )
            return False

        return dependency


def build_sequence(
    source: ShaderSource, sources: Mapping[str, ShaderSource]
) -> list[str]:
    """Return the texts of all dependencies followed by the source's own text.

    The blocks are kept separate so that compilers can report errors relative
    to each original file.
    """
    result: list[str] = [sources[name].block for name in source.dependencies]
    result.append(source.block)
    return result


def collect_builtins(
    source: ShaderSource, sources: Mapping[str, ShaderSource]
) -> BuiltinBits:
    """Union of the builtins used by a source and all of its dependencies."""
    builtins = source.builtins
    for name in source.dependencies:
        builtins |= sources[name].builtins
    return builtins
