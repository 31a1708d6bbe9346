"""
Registry of shader sources and material library functions.

The registry has a strict two phase lifecycle:

1. `init()` wraps every raw source, rewrites enums in shared headers, extracts
   library functions and resolves all require directives. This phase is single
   threaded and must not be interleaved with queries.
2. Queries (`get_resolved_source()`, `get_builtins()`, `use_function()`...)
   only read the registry and may be issued from any number of callers.

`exit()` releases everything. A registry can only be initialized again after
it has been torn down.
"""

from collections.abc import Iterable, Iterator

from loguru import logger

from shaderdeps.config import DEFAULT_CONFIG, RegistryConfig
from shaderdeps.constants import BuiltinBits
from shaderdeps.enum_rewriter import rewrite_enums
from shaderdeps.errors import (
    Diagnostic,
    DuplicateSourceError,
    RegistryInitError,
    RegistryStateError,
    ShaderSourceError,
    UnknownSourceError,
)
from shaderdeps.function_extractor import extract_functions
from shaderdeps.models import (
    FunctionSignature,
    ResolutionState,
    ShaderSource,
    SourceBlock,
    SourceFile,
)
from shaderdeps.resolver import DependencyResolver, build_sequence, collect_builtins

SourceInput = SourceFile | tuple[str, str, str]


def scan_builtins(text: str, keywords: dict[str, BuiltinBits]) -> BuiltinBits:
    """Find the built-in variables referenced by a text.

    This is a plain substring test: identifiers containing a keyword and
    disabled `#if` blocks both produce false positives.
    """
    builtins = BuiltinBits.NONE
    for keyword, flag in keywords.items():
        if keyword in text:
            builtins |= flag
    return builtins


class SourceRegistry:
    """Owns every shader source and the material library function table.

    Examples:
        >>> registry = SourceRegistry()
        >>> registry.init([("a.glsl", "shaders/a.glsl", "void main() {}")])
        0
        >>> registry.get_resolved_source("a.glsl")
        ['void main() {}']
    """

    def __init__(self, config: RegistryConfig | None = None) -> None:
        """Create an empty registry.

        Args:
            config: Naming conventions and markers, defaults apply when None
        """
        self.config = config or DEFAULT_CONFIG
        self.sources: dict[str, ShaderSource] = {}
        self.functions: dict[str, FunctionSignature] = {}
        self.diagnostics: list[Diagnostic] = []
        self._initialized = False

    @classmethod
    def from_sources(
        cls,
        sources: Iterable[SourceInput],
        config: RegistryConfig | None = None,
        strict: bool = False,
    ) -> "SourceRegistry":
        """Create and initialize a registry in one call."""
        registry = cls(config)
        registry.init(sources, strict=strict)
        return registry

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    def init(self, sources: Iterable[SourceInput], strict: bool = False) -> int:
        """Build the registry from raw sources.

        Args:
            sources: `SourceFile` instances or (logical name, path, text) tuples
            strict: Raise instead of returning a non-zero error count

        Returns:
            Number of errors found while building the registry

        Raises:
            RegistryStateError: If the registry is already initialized
            DuplicateSourceError: If two sources share a logical name, the
                registry is left empty as it is for any other exception
            RegistryInitError: If `strict` is set and errors were found
        """
        if self._initialized:
            raise RegistryStateError(
                "Shader source registry is already initialized, call exit() first"
            )

        try:
            for item in sources:
                if not isinstance(item, SourceFile):
                    item = SourceFile(*item)
                self._add_source(item)
            resolver = DependencyResolver(self.sources, self.config.require_directive)
            failed = resolver.resolve_all()
        except BaseException:
            # Never leave a half-built registry behind
            self.exit()
            raise

        self.diagnostics.extend(resolver.diagnostics)
        self._initialized = True

        for diagnostic in self.diagnostics:
            logger.error(diagnostic.format())

        logger.info(
            f"Registered {len(self.sources)} shader sources and "
            f"{len(self.exported_functions())} library functions"
        )
        if self.diagnostics:
            logger.warning(
                f"Dependency errors detected: {self.error_count} error(s), "
                f"{failed} source(s) failed to resolve"
            )
            if strict:
                error = RegistryInitError(self.diagnostics)
                self.exit()
                raise error

        return self.error_count

    def _add_source(self, file: SourceFile) -> ShaderSource:
        previous = self.sources.get(file.filename)
        if previous is not None:
            raise DuplicateSourceError(file.filename, file.fullpath, previous.fullpath)

        config = self.config
        source = ShaderSource(
            fullpath=file.fullpath,
            filename=file.filename,
            raw_text=file.text,
            builtins=scan_builtins(file.text, config.builtin_keywords),
        )
        self.sources[source.filename] = source

        # Limited to shared headers to avoid the temptation of using
        # C++ syntax in shader files
        if config.is_header(source.filename):
            processed, diagnostics = rewrite_enums(
                source.raw_text,
                source.fullpath,
                extended=config.is_extended_header(source.filename),
            )
            source.processed_text = processed
            self.diagnostics.extend(diagnostics)

        if config.is_material_library(source.filename):
            self.diagnostics.extend(
                extract_functions(source, self.functions, self.sources)
            )

        logger.debug(f"Registered shader source {source.filename}")
        return source

    def exit(self) -> None:
        """Release all sources and functions."""
        self.sources = {}
        self.functions = {}
        self.diagnostics = []
        self._initialized = False

    def __enter__(self) -> "SourceRegistry":
        return self

    def __exit__(self, *args: object) -> None:
        self.exit()

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RegistryStateError("Shader source registry is not initialized")

    def _lookup(self, name: str) -> ShaderSource:
        self._require_initialized()
        source = self.sources.get(name)
        if source is None:
            raise UnknownSourceError(name)
        return source

    def __contains__(self, name: object) -> bool:
        return name in self.sources

    def __len__(self) -> int:
        return len(self.sources)

    def __iter__(self) -> Iterator[str]:
        return iter(self.sources)

    def names(self) -> list[str]:
        """Logical names of all registered sources, in registration order."""
        return list(self.sources)

    def get_builtins(self, name: str) -> BuiltinBits:
        """Get the builtins used by a source and all of its dependencies.

        Args:
            name: Logical name of the source

        Returns:
            Union of the builtin flags, empty for an empty or unknown name
        """
        self._require_initialized()
        if not name:
            return BuiltinBits.NONE
        source = self.sources.get(name)
        if source is None:
            logger.error(
                f'Error: Could not find "{name}" in the list of registered sources.'
            )
            return BuiltinBits.NONE
        return collect_builtins(source, self.sources)

    def get_resolved_source(self, name: str) -> list[str]:
        """Get the texts to compile for a source, dependencies first.

        Args:
            name: Logical name of the source

        Returns:
            Text of every dependency in order, followed by the source's own text

        Raises:
            UnknownSourceError: If no source has this name
            ShaderSourceError: If the source failed to resolve
        """
        source = self._lookup(name)
        if source.state is not ResolutionState.RESOLVED:
            raise ShaderSourceError(f"Dependencies of {name!r} could not be resolved")
        return build_sequence(source, self.sources)

    def get_source(self, name: str) -> str:
        """Get the effective text of a single source."""
        return self._lookup(name).block

    def get_dependencies(self, name: str) -> list[str]:
        """Get the logical names of all dependencies of a source, in order."""
        return list(self._lookup(name).dependencies)

    def exported_functions(self) -> dict[str, FunctionSignature]:
        """Functions callable by name, the `void` functions of material libraries."""
        return {name: f for name, f in self.functions.items() if f.exported}

    def use_function(
        self, name: str, used_libraries: set[str] | None = None
    ) -> FunctionSignature | None:
        """Look up a library function and record its source as used.

        Args:
            name: Function name
            used_libraries: Set receiving the logical name of the source
                declaring the function

        Returns:
            The function signature, or None if no library exports it
        """
        self._require_initialized()
        function = self.functions.get(name)
        if function is None or not function.exported:
            logger.error(f"Requested function {name!r} not in the function library")
            return None
        if used_libraries is not None:
            used_libraries.add(function.source)
        return function

    def get_filename_from_source(self, text: str) -> str:
        """Find which source a text block returned by this registry belongs to.

        Only blocks obtained from `get_source()` or `get_resolved_source()`
        carry their owner, any other string gives an empty name.
        """
        self._require_initialized()
        if not isinstance(text, SourceBlock):
            return ""
        source = self.sources.get(text.filename)
        if source is None or source.block is not text:
            return ""
        return source.filename
