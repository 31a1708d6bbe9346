from shaderdeps.config import RegistryConfig
from shaderdeps.constants import BuiltinBits, FunctionQualifier, GPUType
from shaderdeps.errors import (
    Diagnostic,
    DuplicateSourceError,
    ErrorKind,
    RegistryInitError,
    RegistryStateError,
    ShaderSourceError,
    SourceLoadError,
    UnknownSourceError,
)
from shaderdeps.loader import load_sources
from shaderdeps.models import (
    FunctionParameter,
    FunctionSignature,
    ShaderSource,
    SourceBlock,
    SourceFile,
)
from shaderdeps.registry import SourceRegistry

__version__ = "0.1.0"


__all__ = [
    "BuiltinBits",
    "Diagnostic",
    "DuplicateSourceError",
    "ErrorKind",
    "FunctionParameter",
    "FunctionQualifier",
    "FunctionSignature",
    "GPUType",
    "RegistryConfig",
    "RegistryInitError",
    "RegistryStateError",
    "ShaderSource",
    "ShaderSourceError",
    "SourceBlock",
    "SourceFile",
    "SourceLoadError",
    "SourceRegistry",
    "UnknownSourceError",
    "load_sources",
]
