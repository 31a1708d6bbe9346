"""Command line interface for shaderdeps.

This module provides commands to validate a tree of shader sources and to
inspect what the registry built from it.
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import typer
from loguru import logger

from shaderdeps.errors import ShaderSourceError, UnknownSourceError
from shaderdeps.loader import load_sources
from shaderdeps.registry import SourceRegistry

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="shaderdeps",
    help=(
        "Resolve BLENDER_REQUIRE dependencies between shader sources. "
        "Commands: check, resolve, deps, builtins, functions."
    ),
    add_completion=False,
)

# Reusable arguments, module level to avoid B008 warnings
SOURCE_DIR_ARG = typer.Argument(
    ...,
    envvar="SHADERDEPS_SOURCE_DIR",
    help="Directory containing the shader sources",
)
SOURCE_NAME_ARG = typer.Argument(..., help="Logical name (file name) of the source")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors"),
) -> None:
    """Configure logging for all commands."""
    level = "DEBUG" if verbose else "ERROR" if quiet else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level}</level>: {message}")


def _load_registry(source_dir: Path) -> SourceRegistry:
    """Load every source below a directory into a new registry.

    Exits with code 1 when the sources can't be loaded or have errors.
    """
    try:
        registry = SourceRegistry.from_sources(load_sources(source_dir))
    except ShaderSourceError as e:
        logger.error(str(e))
        raise typer.Exit(1) from e

    if registry.error_count:
        logger.error(f"Dependency errors detected: {registry.error_count}")
        raise typer.Exit(1)
    return registry


def _check_name(registry: SourceRegistry, name: str) -> None:
    if name not in registry:
        logger.error(str(UnknownSourceError(name)))
        raise typer.Exit(1)


@typed_command(app.command("check"))
def check(source_dir: Path = SOURCE_DIR_ARG) -> None:
    """Validate all shader sources.

    Reports malformed enums, unknown parameter types, function redefinitions
    and broken require directives. Exits with code 1 on any error.

    Example: shaderdeps check source/gpu/shaders
    """
    registry = _load_registry(source_dir)
    exported = registry.exported_functions()
    typer.echo(f"OK: {len(registry)} sources, {len(exported)} library functions")


@typed_command(app.command("resolve"))
def resolve(
    source_dir: Path = SOURCE_DIR_ARG,
    name: str = SOURCE_NAME_ARG,
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the compilation unit to this file"
    ),
) -> None:
    """Print a source with all of its dependencies, dependencies first.

    Example: shaderdeps resolve source/gpu/shaders gpu_shader_2D_vert.glsl
    """
    registry = _load_registry(source_dir)
    _check_name(registry, name)

    code = "\n".join(registry.get_resolved_source(name))
    if output is None:
        typer.echo(code)
        return

    logger.info(f"Exporting resolved source to {output}...")
    output.write_text(code, encoding="utf-8")
    logger.info(f"Resolved source exported to {output}")


@typed_command(app.command("deps"))
def deps(source_dir: Path = SOURCE_DIR_ARG, name: str = SOURCE_NAME_ARG) -> None:
    """List the dependencies of a source in inclusion order."""
    registry = _load_registry(source_dir)
    _check_name(registry, name)
    for dependency in registry.get_dependencies(name):
        typer.echo(dependency)


@typed_command(app.command("builtins"))
def builtins(source_dir: Path = SOURCE_DIR_ARG, name: str = SOURCE_NAME_ARG) -> None:
    """List the built-in variables used by a source and its dependencies."""
    registry = _load_registry(source_dir)
    _check_name(registry, name)
    flags = registry.get_builtins(name)
    for flag in type(flags):
        if flag.value and flag in flags:
            typer.echo(flag.name)


@typed_command(app.command("functions"))
def functions(source_dir: Path = SOURCE_DIR_ARG) -> None:
    """List the functions exported by material libraries."""
    registry = _load_registry(source_dir)
    exported = registry.exported_functions()
    for name in sorted(exported):
        function = exported[name]
        typer.echo(f"{function.source}: {function}")


if __name__ == "__main__":
    app()
