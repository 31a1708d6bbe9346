"""Loading of shader sources from a directory tree."""

from collections.abc import Iterator, Sequence
from pathlib import Path

from loguru import logger

from shaderdeps.errors import SourceLoadError
from shaderdeps.models import SourceFile

DEFAULT_PATTERNS = ("*.glsl", "*.h", "*.hh", "*.msl")


def iter_source_paths(
    directory: Path, patterns: Sequence[str] = DEFAULT_PATTERNS, recursive: bool = True
) -> Iterator[Path]:
    """Iterate over shader files matching any of the patterns, sorted by path."""
    paths: set[Path] = set()
    for pattern in patterns:
        matches = directory.rglob(pattern) if recursive else directory.glob(pattern)
        paths.update(path for path in matches if path.is_file())
    yield from sorted(paths)


def load_sources(
    directory: str | Path,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    recursive: bool = True,
) -> list[SourceFile]:
    """Read every shader source below a directory.

    The logical name of each source is its file name, so two files with the
    same name in different subdirectories are rejected by the registry.

    Args:
        directory: Root directory of the shader sources
        patterns: Glob patterns of the files to load
        recursive: Whether to descend into subdirectories

    Returns:
        Loaded sources, sorted by path

    Raises:
        SourceLoadError: If the directory does not exist or a file can't be read
    """
    root = Path(directory)
    if not root.is_dir():
        raise SourceLoadError(f"Shader source directory not found: {root}")

    sources = []
    for path in iter_source_paths(root, patterns, recursive):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceLoadError(f"Failed to read shader source {path}: {e}") from e
        sources.append(SourceFile(filename=path.name, fullpath=str(path), text=text))

    logger.debug(f"Loaded {len(sources)} shader sources from {root}")
    return sources
