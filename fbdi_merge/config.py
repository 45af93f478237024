"""
Run configuration.

Settings can come from an optional YAML file; command line flags override
them. Example config.yaml:

    csv_encoding: cp1252
    progress_width: 60
    log_dir: logs
    report_path: logs/merge_report.json
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from .constants import DEFAULT_CSV_ENCODING, PROGRESS_BAR_WIDTH
from .errors import ConfigError


@dataclass(frozen=True)
class MergeConfig:
    """Settings for one merge run."""

    csv_encoding: str = DEFAULT_CSV_ENCODING
    progress_width: int = PROGRESS_BAR_WIDTH
    log_dir: Optional[str] = None
    report_path: Optional[str] = None

    def with_overrides(self, **overrides) -> 'MergeConfig':
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(config_path: Path) -> MergeConfig:
    """
    Load configuration from a YAML file.

    Raises:
        ConfigError: If the file cannot be read or holds unknown settings
    """
    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e

    if data is None:
        return MergeConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping of settings")

    known = {f.name for f in fields(MergeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config settings in {config_path}: {', '.join(unknown)}")

    width = data.get('progress_width', PROGRESS_BAR_WIDTH)
    if not isinstance(width, int) or isinstance(width, bool) or width < 1:
        raise ConfigError(f"progress_width must be a positive integer, got {width!r}")

    return MergeConfig(**data)
