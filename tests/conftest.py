"""Fixtures and configuration for pytest."""

import textwrap
from collections.abc import Callable

import pytest

from shaderdeps.registry import SourceRegistry


def glsl(code: str) -> str:
    """Dedent an inline shader snippet."""
    return textwrap.dedent(code).lstrip("\n")


@pytest.fixture
def make_registry() -> Callable[..., SourceRegistry]:
    """Build an initialized registry from a {logical name: text} mapping."""

    def factory(files: dict[str, str], **kwargs) -> SourceRegistry:
        registry = SourceRegistry(**kwargs)
        registry.init(
            (name, f"shaders/{name}", glsl(text)) for name, text in files.items()
        )
        return registry

    return factory


@pytest.fixture
def shader_dir(tmp_path):
    """Create a small shader tree on disk."""
    files = {
        "common_math_lib.glsl": """
            float square(float x) { return x * x; }
            """,
        "common_shape_lib.glsl": """
            #pragma BLENDER_REQUIRE(common_math_lib.glsl)
            float circle(vec2 p) { return square(p.x) + square(p.y); }
            """,
        "gpu_shader_2D_frag.glsl": """
            #pragma BLENDER_REQUIRE(common_shape_lib.glsl)
            void main() { fragColor = vec4(circle(gl_FragCoord.xy)); }
            """,
        "gpu_shader_material_mix.glsl": """
            void node_mix(float fac, vec4 a, vec4 b, out vec4 result)
            {
              result = mix(a, b, fac);
            }
            """,
        "shader_shared.hh": """
            enum eShaderType : uint32_t {
              SHADER_A = 0u,
              SHADER_B = 1u,
            };
            """,
    }
    for name, text in files.items():
        sub = tmp_path / ("infos" if name.endswith(".hh") else "glsl")
        sub.mkdir(exist_ok=True)
        (sub / name).write_text(glsl(text))
    (tmp_path / "README.txt").write_text("not a shader")
    return tmp_path
