"""Configuration system for the DO cross model.

YAML configuration with deep-merge support:
  base.yaml → override file → explicit overrides dict

Only model behaviour lives here. The pre-CC mixture is part of the DO
breeding design and is fixed in dopk.types.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class ModelSection:
    """HMM model settings.

    strict: check genotype codes on every init/emit/step call and raise
            ValueError on codes outside the state space. Turn off only
            when the engine is known to pass codes from possible_gen().
    """
    strict: bool = True
    error_prob: float = 1.0e-4     # default genotyping error probability


@dataclass
class DOPKConfig:
    """Complete configuration. Sections map 1:1 to YAML top-level keys."""
    model: ModelSection = field(default_factory=ModelSection)


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values are replaced
    - Keys in override but not base are added

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> DOPKConfig:
    """Convert a merged YAML dict to a DOPKConfig."""
    sections = {}
    section_map = {
        'model': ModelSection,
    }
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return DOPKConfig(**sections)


def validate_config(config: DOPKConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure."""
    m = config.model
    if not isinstance(m.strict, bool):
        raise ValueError(f"model.strict must be true or false, got {m.strict!r}")
    if isinstance(m.error_prob, bool) or not isinstance(m.error_prob, (int, float)):
        raise ValueError(f"model.error_prob must be a number, got {m.error_prob!r}")
    if not 0.0 <= m.error_prob < 1.0:
        raise ValueError(
            f"model.error_prob must be in [0, 1), got {m.error_prob}"
        )


def load_config(
    base_path: Union[str, Path],
    override_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> DOPKConfig:
    """Load and merge YAML configuration.

    Merge order: base → override file → overrides dict. Each layer
    overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        override_path: Optional override YAML; skipped if it doesn't exist.
        overrides: Optional dict of overrides applied last.

    Returns:
        Validated DOPKConfig.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        ValueError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        config_dict = yaml.safe_load(f) or {}

    if override_path is not None:
        override_path = Path(override_path)
        if override_path.exists():
            with open(override_path) as f:
                override = yaml.safe_load(f) or {}
            deep_merge(config_dict, override)

    if overrides is not None:
        deep_merge(config_dict, overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> DOPKConfig:
    """Return a DOPKConfig with all default values."""
    config = DOPKConfig()
    validate_config(config)
    return config
