"""
HLSL AST Library - Entry point

Run with: python -m hlsl_ast_lib
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
