"""
Constants and predefined values for the shader dependency builder.

This module contains the builtin keyword table, the closed parameter type
vocabulary of material library functions and the naming conventions used to
classify shader sources.
"""

from enum import Enum, Flag, auto

# Marker searched in shader text to declare a dependency on another source
REQUIRE_DIRECTIVE = "pragma BLENDER_REQUIRE("

# Shared header files, the only ones eligible for enum rewriting
HEADER_SUFFIXES = (".h", ".hh")
# C++ headers require an explicit `uint32_t` underlying enum type
EXTENDED_HEADER_SUFFIX = ".hh"

# Material function libraries: gpu_shader_material_*.glsl
LIBRARY_PREFIX = "gpu_shader_material_"
LIBRARY_SUFFIX = ".glsl"

# Maximum number of parameters a library function may declare
MAX_FUNCTION_PARAMETERS = 36

# Characters allowed right before a whole-word keyword match
KEYWORD_BOUNDARY_CHARS = ("\n", "\t", " ", ":", "(", ",")

WHITESPACE_CHARS = " \n\t"


class BuiltinBits(Flag):
    """Shading language built-in variables referenced by a source."""

    NONE = 0
    FRAG_COORD = auto()
    FRONT_FACING = auto()
    GLOBAL_INVOCATION_ID = auto()
    INSTANCE_ID = auto()
    LOCAL_INVOCATION_ID = auto()
    LOCAL_INVOCATION_INDEX = auto()
    NUM_WORK_GROUP = auto()
    POINT_COORD = auto()
    POINT_SIZE = auto()
    PRIMITIVE_ID = auto()
    VERTEX_ID = auto()
    WORK_GROUP_ID = auto()
    WORK_GROUP_SIZE = auto()


# Plain substring test, disabled #if blocks can give false positives
BUILTIN_KEYWORDS: dict[str, BuiltinBits] = {
    "gl_FragCoord": BuiltinBits.FRAG_COORD,
    "gl_FrontFacing": BuiltinBits.FRONT_FACING,
    "gl_GlobalInvocationID": BuiltinBits.GLOBAL_INVOCATION_ID,
    "gl_InstanceID": BuiltinBits.INSTANCE_ID,
    "gl_LocalInvocationID": BuiltinBits.LOCAL_INVOCATION_ID,
    "gl_LocalInvocationIndex": BuiltinBits.LOCAL_INVOCATION_INDEX,
    "gl_NumWorkGroup": BuiltinBits.NUM_WORK_GROUP,
    "gl_PointCoord": BuiltinBits.POINT_COORD,
    "gl_PointSize": BuiltinBits.POINT_SIZE,
    "gl_PrimitiveID": BuiltinBits.PRIMITIVE_ID,
    "gl_VertexID": BuiltinBits.VERTEX_ID,
    "gl_WorkGroupID": BuiltinBits.WORK_GROUP_ID,
    "gl_WorkGroupSize": BuiltinBits.WORK_GROUP_SIZE,
}


class GPUType(Enum):
    """Parameter types accepted in material library function signatures."""

    NONE = auto()  # Unknown keyword
    FLOAT = auto()
    VEC2 = auto()
    VEC3 = auto()
    VEC4 = auto()
    MAT3 = auto()
    MAT4 = auto()
    TEX1D_ARRAY = auto()
    TEX2D_ARRAY = auto()
    TEX2D = auto()
    TEX3D = auto()
    CLOSURE = auto()


class FunctionQualifier(Enum):
    """Parameter storage qualifier."""

    IN = auto()
    OUT = auto()
    INOUT = auto()


PARAMETER_TYPES: dict[str, GPUType] = {
    "float": GPUType.FLOAT,
    "vec2": GPUType.VEC2,
    "vec3": GPUType.VEC3,
    "vec4": GPUType.VEC4,
    "mat3": GPUType.MAT3,
    "mat4": GPUType.MAT4,
    "sampler1DArray": GPUType.TEX1D_ARRAY,
    "sampler2DArray": GPUType.TEX2D_ARRAY,
    "sampler2D": GPUType.TEX2D,
    "sampler3D": GPUType.TEX3D,
    "Closure": GPUType.CLOSURE,
}

PARAMETER_QUALIFIERS: dict[str, FunctionQualifier] = {
    "out": FunctionQualifier.OUT,
    "inout": FunctionQualifier.INOUT,
}

# Only `void` functions are exported, the other return types are located to
# keep names unique across libraries
EXPORTED_RETURN_TYPE = "void"
RETURN_TYPES = (
    EXPORTED_RETURN_TYPE,
    "float",
    "int",
    "uint",
    "bool",
    "vec2",
    "vec3",
    "vec4",
    "ivec2",
    "ivec3",
    "ivec4",
    "uvec2",
    "uvec3",
    "uvec4",
    "bvec2",
    "bvec3",
    "bvec4",
    "mat2",
    "mat3",
    "mat4",
    "Closure",
)
