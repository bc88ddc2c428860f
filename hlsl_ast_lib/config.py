"""
Configuration Persistence

Tool settings (compiler location, profiles, include dirs, output naming)
saved to and loaded from a YAML file.
"""

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .codegen import DEFAULT_EXTENSION, DEFAULT_NAMESPACE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "hlsl_ast_lib" / "config.yaml"


@dataclass(frozen=True)
class ToolConfig:
    """
    Settings passed explicitly into every workflow.

    Attributes:
        dxc_path: dxc executable (name on PATH or full path)
        shader_model: Suffix appended to profiles ("ps" -> "ps_6_0")
        property_profile: Profile used when compiling a ShaderLab program block
        reference_profile: Profile used when generating C# references
        include_dirs: Extra -I directories
        workspace_root: Compile from here, with paths relative to it
        csharp_namespace: Namespace of generated reference classes
        reference_extension: Extension of the generated file
        timeout: Seconds before the compiler is abandoned (None = wait)
    """
    dxc_path: str = "dxc"
    shader_model: str = "6_0"
    property_profile: str = "ps"
    reference_profile: str = "cs"
    include_dirs: Tuple[str, ...] = field(default_factory=tuple)
    workspace_root: Optional[str] = None
    csharp_namespace: str = DEFAULT_NAMESPACE
    reference_extension: str = DEFAULT_EXTENSION
    timeout: Optional[float] = None

    def __post_init__(self):
        """Validate configuration."""
        if not self.dxc_path:
            raise ValueError("dxc_path must not be empty")
        if not self.reference_extension.startswith("."):
            raise ValueError("reference_extension must start with '.'")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(self, "include_dirs", tuple(self.include_dirs))

    def target(self, profile: str) -> str:
        """Full target profile, e.g. "cs_6_0"."""
        return f"{profile}_{self.shader_model}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["include_dirs"] = list(self.include_dirs)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def with_overrides(self, **overrides: Any) -> "ToolConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def save_config(config: ToolConfig, path: Optional[Path] = None) -> bool:
    """
    Save settings to YAML file.

    Args:
        config: Settings to persist
        path: File path (default: ~/.config/hlsl_ast_lib/config.yaml)

    Returns:
        True if saved successfully
    """
    path = path or DEFAULT_CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
        logger.info(f"Saved config to {path}")
        return True

    except Exception as e:
        logger.error(f"Failed to save config: {e}")
        return False


def load_config(path: Optional[Path] = None) -> ToolConfig:
    """
    Load settings from YAML file.

    Missing or unreadable files give the defaults.
    """
    path = path or DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.info(f"No config file at {path}")
        return ToolConfig()

    try:
        with open(path) as f:
            data = yaml.safe_load(f)

        if not data:
            return ToolConfig()

        config = ToolConfig.from_dict(data)
        logger.info(f"Loaded config from {path}")
        return config

    except Exception as e:
        logger.error(f"Failed to load config: {e}")
        return ToolConfig()
