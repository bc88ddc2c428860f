"""
Pytest configuration and fixtures for hlsl_ast_lib tests.
"""

import pytest

from hlsl_ast_lib.compiler import DxcCompiler


# Compute shader dump: three globals, an implicit builtin, a helper and a kernel
COMPUTE_DUMP = "\n".join([
    "TranslationUnitDecl 0x55a1c0 <<invalid sloc>> <invalid sloc>",
    "|-VarDecl 0x55a2e8 <C:\\proj\\Blur.compute:1:1, col:26> col:26 used _Result "
    "'RWTexture2D<float4>':'RWTexture2D<vector<float, 4> >'",
    "|-VarDecl 0x55a3a0 <line:2:1, col:7> col:7 used _Radius 'float'",
    "|-VarDecl 0x55a420 <line:3:1, col:8> col:8 _Tint 'const float4'",
    "|-FunctionDecl 0x55a500 <<invalid sloc>> <invalid sloc> implicit used abs 'float (float)'",
    "| `-HLSLNumThreadsAttr 0x55a5a0 <<invalid sloc>> Implicit 1 1 1",
    "|-FunctionDecl 0x55a600 <line:5:1, line:9:1> line:5:7 Helper 'float (float)'",
    "| |-ParmVarDecl 0x55a610 <col:14, col:20> col:20 used x 'float'",
    "| `-CompoundStmt 0x55a700 <line:6:1, line:9:1>",
    "|   `-ReturnStmt 0x55a710 <line:8:5, col:12>",
    "|     `-DeclRefExpr 0x55a720 <col:12> 'float' lvalue ParmVar 0x55a610 'x' 'float'",
    "`-FunctionDecl 0x55a800 <line:11:1, line:15:1> line:12:6 CSMain 'void (uint3)'",
    "  |-ParmVarDecl 0x55a810 <col:13, col:25> col:19 id 'uint3'",
    "  |-CompoundStmt 0x55a900 <line:13:1, line:15:1>",
    "  `-HLSLNumThreadsAttr 0x55a950 <line:11:2, col:21> 8 8 1",
    "",
])

# ShaderLab file; CGPROGRAM body starts on document line 12 (0-based)
LIT_SHADER = "\n".join([
    'Shader "Custom/Lit"',                        # 0
    "{",                                          # 1
    "    Properties",                             # 2
    "    {",                                      # 3
    '        _MainTex ("Texture", 2D) = "white" {}',  # 4
    '        _Foo ("Foo", Float) = 1',            # 5
    "    }",                                      # 6
    "    SubShader",                              # 7
    "    {",                                      # 8
    "        Pass",                               # 9
    "        {",                                  # 10
    "            CGPROGRAM",                      # 11
    "            #pragma vertex vert",            # 12
    "            #pragma fragment frag",          # 13
    "            sampler2D _MainTex;",            # 14
    "            float _Foo;",                    # 15
    "            half _Glossiness = 0.5; // smoothness",  # 16
    "            float4 _Tint;",                  # 17
    "            ENDCG",                          # 18
    "        }",                                  # 19
    "    }",                                      # 20
    "}",                                          # 21
])

# Dump of the LIT_SHADER program body (body line = document line - 11)
LIT_BODY_DUMP = "\n".join([
    "TranslationUnitDecl 0x1 <<invalid sloc>> <invalid sloc>",
    "|-VarDecl 0x2 <C:\\Temp\\tmpq1w2.hlsl:3:1, col:23> col:23 _MainTex 'sampler2D'",
    "|-VarDecl 0x3 <line:4:1, col:19> col:19 _Foo 'float'",
    "|-VarDecl 0x4 <line:5:1, col:18> col:18 _Glossiness 'half' cinit",
    "| `-FloatingLiteral 0x5 <col:32> 'literal float' 5.000000e-01",
    "`-VarDecl 0x6 <line:6:1, col:20> col:20 _Tint 'float4'",
])


class FakeCompiler(DxcCompiler):
    """DxcCompiler returning canned dump text and recording its calls."""

    def __init__(self, dump: str = "", config=None):
        super().__init__(config)
        self.dump = dump
        self.calls = []

    def dump_ast(self, path, profile, cwd=None, includes=()):
        self.calls.append(("dump_ast", path, profile, cwd, list(includes)))
        return self.dump

    def dump_source(self, source, profile, includes=()):
        self.calls.append(("dump_source", source, profile, None, list(includes)))
        return self.dump


@pytest.fixture
def compute_dump():
    return COMPUTE_DUMP


@pytest.fixture
def lit_shader():
    return LIT_SHADER


@pytest.fixture
def lit_compiler():
    """Compiler that answers with the dump of the LIT_SHADER program."""
    return FakeCompiler(LIT_BODY_DUMP)


@pytest.fixture
def fake_compiler():
    """FakeCompiler factory: fake_compiler(dump_text)."""
    return FakeCompiler
