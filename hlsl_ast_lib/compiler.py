"""
dxc Adapter

Runs the DirectX shader compiler in AST-dump mode and hands back whatever it
printed. Compiler failures are logged, never raised: a broken shader still
produces a (possibly empty) dump and the extractors simply find nothing.
"""

import logging
import os
import re
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import ToolConfig

logger = logging.getLogger(__name__)

PROGRAM_START = re.compile(r"\b(CGPROGRAM|HLSLPROGRAM)\b")
PROGRAM_END = re.compile(r"\b(ENDCG|ENDHLSL)\b")


@dataclass(frozen=True)
class ProgramBlock:
    """Shader program code around a selected line."""
    body: str
    line_number: int  # 1-based line of the selection inside body


def isolate_program_block(text: str, line_index: int) -> Optional[ProgramBlock]:
    """
    Cut the CGPROGRAM/HLSLPROGRAM ... ENDCG/ENDHLSL region holding a line.

    A document without any program markers is plain HLSL and is returned
    whole. Returns None when the line lies outside every program block.
    """
    lines = text.split("\n")
    if not 0 <= line_index < len(lines):
        return None

    if not PROGRAM_START.search(text):
        return ProgramBlock(body=text, line_number=line_index + 1)

    start = None
    for i in range(line_index, -1, -1):
        if PROGRAM_END.search(lines[i]) and i != line_index:
            return None
        if PROGRAM_START.search(lines[i]):
            start = i
            break
    if start is None or start == line_index:
        return None

    end = None
    for i in range(line_index, len(lines)):
        if PROGRAM_END.search(lines[i]):
            end = i
            break
    if end is None or end == line_index:
        return None

    body = "\n".join(lines[start + 1:end])
    return ProgramBlock(body=body, line_number=line_index - start)


class DxcCompiler:
    """Thin wrapper over ``dxc -ast-dump``."""

    def __init__(self, config: Optional[ToolConfig] = None):
        self._config = config or ToolConfig()

    @property
    def config(self) -> ToolConfig:
        return self._config

    def build_command(self, path: str, profile: str, includes: Iterable[str] = ()) -> List[str]:
        cmd = [self._config.dxc_path, "-T", self._config.target(profile)]
        for include in list(includes) + list(self._config.include_dirs):
            cmd += ["-I", include]
        cmd += ["-ast-dump", path]
        return cmd

    def dump_ast(self, path: str, profile: str,
                 cwd: Optional[str] = None,
                 includes: Iterable[str] = ()) -> str:
        """
        Compile one file and return the dump text.

        Returns "" when dxc cannot be run; on a failed compile returns whatever
        was printed to stdout.
        """
        cmd = self.build_command(path, profile, includes)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self._config.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.warning(f"dxc not found: {self._config.dxc_path}")
            return ""
        except subprocess.TimeoutExpired:
            logger.warning(f"dxc timed out after {self._config.timeout}s on {path}")
            return ""

        if result.returncode != 0:
            message = (result.stderr or "").strip().splitlines()
            logger.warning(
                f"dxc exit {result.returncode} on {path}"
                + (f": {message[0]}" if message else "")
            )

        output = result.stdout or ""
        if not output.strip():
            logger.warning(f"dxc printed no AST for {path}")
        return output

    def dump_source(self, source: str, profile: str, includes: Iterable[str] = ()) -> str:
        """Compile source text through a private temporary file."""
        handle = tempfile.NamedTemporaryFile("w", suffix=".hlsl", delete=False)
        try:
            with handle:
                handle.write(source)
            return self.dump_ast(handle.name, profile, includes=includes)
        finally:
            try:
                os.unlink(handle.name)
            except OSError as e:
                logger.debug(f"Could not remove {handle.name}: {e}")
