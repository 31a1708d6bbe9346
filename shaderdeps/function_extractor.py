"""
Function signature extraction for material libraries.

Material library sources export `void` functions that the node tree compiler
calls by name. This module scans those sources and registers every function
in a shared function table, with the parameter list of the exported ones.
Function names are unique across libraries whatever their return type.
"""

from collections.abc import Iterator, Mapping

from loguru import logger

from shaderdeps.constants import (
    EXPORTED_RETURN_TYPE,
    MAX_FUNCTION_PARAMETERS,
    PARAMETER_QUALIFIERS,
    PARAMETER_TYPES,
    RETURN_TYPES,
    FunctionQualifier,
    GPUType,
)
from shaderdeps.errors import Diagnostic, ErrorKind
from shaderdeps.models import FunctionParameter, FunctionSignature, ShaderSource
from shaderdeps.scanner import NOT_FOUND, find_keyword, find_token, rfind_keyword


def split_parameters(args: str) -> list[str]:
    """Split a parameter list on commas that are not inside comments.

    Args:
        args: Text between the parentheses of a function declaration

    Returns:
        Raw text of each parameter
    """
    params = []
    cursor = NOT_FOUND
    while cursor + 1 < len(args):
        start = cursor + 1
        cursor = find_token(args, ",", start)
        if cursor == NOT_FOUND:
            # Last parameter
            cursor = len(args)
        params.append(args[start:cursor])
    return params


def parse_parameter(param: str) -> tuple[str, str, str]:
    """Split a parameter into its qualifier, type and name keywords.

    With only two keywords the qualifier is omitted and returned empty.
    """
    keywords = param.split()
    if len(keywords) >= 3:
        qualifier, type_name, name = keywords[:3]
        return qualifier, type_name, name
    type_name = keywords[0] if keywords else ""
    name = keywords[1] if len(keywords) > 1 else ""
    return "", type_name, name


def parse_qualifier(qualifier: str) -> FunctionQualifier:
    return PARAMETER_QUALIFIERS.get(qualifier, FunctionQualifier.IN)


def parse_type(type_name: str) -> GPUType:
    return PARAMETER_TYPES.get(type_name, GPUType.NONE)


def _type_offset(text: str, name_offset: int, param_name: str, type_name: str) -> int:
    """Locate a parameter type keyword for error reporting."""
    offset = name_offset
    if param_name:
        found = find_keyword(text, param_name, offset)
        if found != NOT_FOUND:
            offset = found
    if type_name:
        found = rfind_keyword(text, type_name, offset)
        if found != NOT_FOUND:
            offset = found
    return offset


def _find_declarations(text: str, return_type: str) -> Iterator[tuple[int, int, int]]:
    """Locate `<return_type> name(...)` declarations outside comments.

    Yields:
        Offsets of the return type keyword, the opening and the closing
        parenthesis
    """
    keyword = return_type + " "
    cursor = NOT_FOUND
    while True:
        cursor = find_keyword(text, keyword, cursor + 1)
        if cursor == NOT_FOUND:
            return
        arg_start = find_token(text, "(", cursor)
        if arg_start == NOT_FOUND:
            return
        arg_end = find_token(text, ")", arg_start)
        if arg_end == NOT_FOUND:
            return
        # Variables and parameters of that type are not followed by `name(`
        if text[cursor + len(return_type) : arg_start].strip().isidentifier():
            yield cursor, arg_start, arg_end


def _redefinition(
    name: str,
    path: str,
    text: str,
    name_offset: int,
    other: ShaderSource,
) -> Diagnostic:
    previous = Diagnostic.at(
        ErrorKind.FUNCTION_REDEFINITION,
        other.fullpath,
        other.text,
        find_keyword(other.text, name, 0),
        "... previous definition was here",
    )
    return Diagnostic.at(
        ErrorKind.FUNCTION_REDEFINITION,
        path,
        text,
        name_offset,
        "Function redefinition or overload in two different files ...",
        previous=previous,
    )


def extract_functions(
    source: ShaderSource,
    functions: dict[str, FunctionSignature],
    sources: Mapping[str, ShaderSource],
) -> list[Diagnostic]:
    """Register every function declared by a material library.

    Only `void` functions are exported with their parameter list. Functions
    with any other return type are registered by name only, so that a name
    can't be declared by two libraries whatever its return type.

    Overloads are allowed only inside a single source, otherwise the
    dependency system could not tell which file to include. Later overloads
    of a name declared in the same source are discarded, except that a `void`
    overload takes the place of a function that isn't exported.

    Args:
        source: Material library source to scan
        functions: Function table to populate, keyed by function name
        sources: Registered sources, used to locate previous definitions

    Returns:
        Diagnostics for prototypes, unknown parameter types and redefinitions
    """
    text = source.text
    path = source.fullpath
    diagnostics: list[Diagnostic] = []

    declarations = sorted(
        (cursor, return_type, arg_start, arg_end)
        for return_type in RETURN_TYPES
        for cursor, arg_start, arg_end in _find_declarations(text, return_type)
    )
    for cursor, return_type, arg_start, arg_end in declarations:
        exported = return_type == EXPORTED_RETURN_TYPE
        body_start = find_token(text, "{", arg_end)
        next_semicolon = find_token(text, ";", arg_end)
        if next_semicolon != NOT_FOUND and (
            body_start == NOT_FOUND or body_start > next_semicolon
        ):
            if exported:
                diagnostics.append(
                    Diagnostic.at(
                        ErrorKind.PROTOTYPE_IN_LIBRARY,
                        path,
                        text,
                        cursor,
                        "No prototypes allowed in node GLSL libraries.",
                    )
                )
            continue

        name = text[cursor + len(return_type) : arg_start].strip()
        name_offset = find_keyword(text, name, cursor)

        existing = functions.get(name)
        if existing is not None:
            if existing.source != source.filename:
                other = sources[existing.source]
                diagnostics.append(_redefinition(name, path, text, name_offset, other))
                continue
            if existing.exported or not exported:
                logger.debug(f"Ignoring overload of {name} in {source.filename}")
                continue

        signature = FunctionSignature(
            name=name, source=source.filename, return_type=return_type
        )
        functions[name] = signature
        if not exported:
            logger.debug(f"Collected {return_type} function {name}, not exported")
            continue

        for param in split_parameters(text[arg_start + 1 : arg_end]):
            if not param.strip():
                continue
            if len(signature.parameters) >= MAX_FUNCTION_PARAMETERS:
                diagnostics.append(
                    Diagnostic.at(
                        ErrorKind.TOO_MANY_PARAMETERS,
                        path,
                        text,
                        name_offset,
                        "Too much parameter in function",
                    )
                )
                break

            qualifier, type_name, param_name = parse_parameter(param)
            param_type = parse_type(type_name)
            if param_type is GPUType.NONE:
                diagnostics.append(
                    Diagnostic.at(
                        ErrorKind.UNKNOWN_PARAMETER_TYPE,
                        path,
                        text,
                        _type_offset(text, name_offset, param_name, type_name),
                        f'Unknown parameter type "{type_name}"',
                    )
                )
            signature.parameters.append(
                FunctionParameter(
                    qualifier=parse_qualifier(qualifier),
                    type=param_type,
                    name=param_name,
                )
            )

        logger.debug(f"Collected function: {signature}")

    return diagnostics
