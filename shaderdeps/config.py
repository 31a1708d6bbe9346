"""Configuration of the shader dependency builder."""

from dataclasses import dataclass, field

from shaderdeps.constants import (
    BUILTIN_KEYWORDS,
    EXTENDED_HEADER_SUFFIX,
    HEADER_SUFFIXES,
    LIBRARY_PREFIX,
    LIBRARY_SUFFIX,
    REQUIRE_DIRECTIVE,
    BuiltinBits,
)


@dataclass(frozen=True)
class RegistryConfig:
    """Naming conventions and markers used while building a source registry.

    Attributes:
        require_directive: Text opening a dependency directive, up to and
            including the opening parenthesis
        header_suffixes: Filename suffixes of shared headers (enum rewriting)
        extended_header_suffix: Suffix of headers whose enums must declare
            a `uint32_t` underlying type
        library_prefix: Filename prefix of material function libraries
        library_suffix: Filename suffix of material function libraries
        builtin_keywords: Keyword to flag mapping for the builtin scan
    """

    require_directive: str = REQUIRE_DIRECTIVE
    header_suffixes: tuple[str, ...] = HEADER_SUFFIXES
    extended_header_suffix: str = EXTENDED_HEADER_SUFFIX
    library_prefix: str = LIBRARY_PREFIX
    library_suffix: str = LIBRARY_SUFFIX
    builtin_keywords: dict[str, BuiltinBits] = field(
        default_factory=lambda: dict(BUILTIN_KEYWORDS)
    )

    def is_header(self, filename: str) -> bool:
        return filename.endswith(self.header_suffixes)

    def is_extended_header(self, filename: str) -> bool:
        return filename.endswith(self.extended_header_suffix)

    def is_material_library(self, filename: str) -> bool:
        return filename.startswith(self.library_prefix) and filename.endswith(
            self.library_suffix
        )


DEFAULT_CONFIG = RegistryConfig()
