"""
C# Reference Generation

Renders a static class exposing every global variable as a shader property
id and every kernel as a ComputeShader kernel index. Setup() fills them in at
runtime by reflection.
"""

import os
from typing import Sequence

DEFAULT_NAMESPACE = "ComputeShaderReferences"
DEFAULT_EXTENSION = ".cs"


def class_name_for(shader_path: str) -> str:
    """File name up to the first dot: "Shaders/Blur.compute" -> "Blur"."""
    return os.path.basename(shader_path.replace("\\", "/")).split(".")[0]


def reference_path_for(shader_path: str, extension: str = DEFAULT_EXTENSION) -> str:
    """Sibling path with the shader extension swapped."""
    return os.path.splitext(shader_path)[0] + extension


def render_csharp_references(class_name: str,
                             variables: Sequence[str],
                             kernels: Sequence[str],
                             namespace: str = DEFAULT_NAMESPACE) -> str:
    cs_variables = "\n".join(f"\t\tpublic static int {v};" for v in variables)
    cs_kernels = "\n\n".join(f"\t\tpublic static int {k} {{ get; set; }}" for k in kernels)
    return f"""using UnityEngine;

namespace {namespace}
{{
\tpublic static class {class_name}
\t{{
{cs_variables}

{cs_kernels}

\t\tpublic static void Setup(ComputeShader cs)
\t\t{{
\t\t\tforeach (var info in typeof({class_name}).GetFields())
\t\t\t{{
\t\t\t\tvar index = Shader.PropertyToID(info.Name);
\t\t\t\tinfo.SetValue(null, index);
\t\t\t}}
\t\t\tforeach (var info in typeof({class_name}).GetProperties())
\t\t\t{{
\t\t\t\ttry
\t\t\t\t{{
\t\t\t\t\tvar index = cs.FindKernel(info.Name);
\t\t\t\t\tinfo.SetValue(null, index);
\t\t\t\t}}
\t\t\t\tcatch
\t\t\t\t{{
\t\t\t\t\tcontinue;
\t\t\t\t}}
\t\t\t}}
\t\t}}
\t}}
}}"""
