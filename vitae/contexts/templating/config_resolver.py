"""
Pipeline Configuration

Builds the immutable PipelineConfig that the normalization pipeline receives
explicitly. Settings start from defaults.py and can be overridden by named
budget profiles stored in YAML (loaded with OmegaConf), so different templates
and tests can use different budgets without touching shared state.

Examples:
    # Process-wide defaults
    >>> config = get_default_config()

    # Tighter budgets from configs/budget_profiles.yaml
    >>> config = load_pipeline_config(profile="compact")

    # Disable clamping for a preview run
    >>> config = load_pipeline_config(clamp_enabled=False)
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from vitae.contexts.templating.defaults import get_default_settings

load_dotenv()
BUDGET_PROFILES_PATH = Path(os.getenv("BUDGET_PROFILES_PATH", "configs/budget_profiles.yaml"))
CLAMP_ENABLED = os.getenv("VITAE_CLAMP_ENABLED", "true").lower() == "true"


@dataclass(frozen=True)
class FieldBudget:
    """
    Space budget for one field.

    Attributes:
        max_chars: Characters per line (or total, for single-line clamps)
        max_lines: Number of wrapped lines; None means single-line clamp
    """

    max_chars: int
    max_lines: Optional[int] = None


@dataclass(frozen=True)
class BlockFieldSpec:
    """Aliases for one sub-field of a repeated block."""

    flat: Tuple[str, ...]
    nested: Tuple[str, ...]


@dataclass(frozen=True)
class BulletSpec:
    """Bullet sub-list of a repeated block."""

    count: int
    flat: Tuple[str, ...]
    nested: Tuple[str, ...]


@dataclass(frozen=True)
class BlockSpec:
    """
    Repeated block (experience, education, references).

    Output keys are {prefix}_{n}_{field} and, for bullets, {prefix}_{n}_b{m}.
    """

    prefix: str
    count: int
    array_keys: Tuple[str, ...]
    fields: Mapping[str, BlockFieldSpec]
    bullets: Optional[BulletSpec] = None


@dataclass(frozen=True)
class ListSpec:
    """Fixed-size list whose output keys are {name}_1..{name}_{count}."""

    name: str
    count: int
    list_keys: Tuple[str, ...]
    indexed_prefixes: Tuple[str, ...]
    free_text_keys: Tuple[str, ...]


@dataclass(frozen=True)
class PipelineConfig:
    """
    Immutable settings for one normalization pipeline.

    Built once (per process or per test) and passed explicitly; nothing in the
    pipeline reads settings from module scope.
    """

    clamp_enabled: bool
    envelope_keys: Tuple[str, ...]
    scalars: Mapping[str, Tuple[str, ...]]
    contact_keys: Tuple[str, ...]
    contact_fields: Mapping[str, Tuple[str, ...]]
    blocks: Tuple[BlockSpec, ...]
    lists: Tuple[ListSpec, ...]
    budgets: Mapping[str, FieldBudget]
    photo_inline_keys: Tuple[str, ...]
    photo_url_keys: Tuple[str, ...]
    photo_size_px: int
    max_redirects: int
    fetch_timeout_s: float

    def budget_for(self, budget_key: str) -> Optional[FieldBudget]:
        """Return the budget for a field, or None when the field is unbounded."""
        return self.budgets.get(budget_key)


def _frozen(mapping: Dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


def build_pipeline_config(settings: Dict[str, Any]) -> PipelineConfig:
    """
    Convert a plain settings tree (see defaults.get_default_settings) to a PipelineConfig.

    Args:
        settings: Complete settings dict

    Returns:
        Frozen PipelineConfig
    """
    blocks = []
    for prefix, block in settings["blocks"].items():
        bullets = block.get("bullets")
        blocks.append(
            BlockSpec(
                prefix=prefix,
                count=int(block["count"]),
                array_keys=tuple(block.get("array_keys", ())),
                fields=_frozen(
                    {
                        name: BlockFieldSpec(
                            flat=tuple(spec.get("flat", ())), nested=tuple(spec.get("nested", ()))
                        )
                        for name, spec in block["fields"].items()
                    }
                ),
                bullets=(
                    BulletSpec(
                        count=int(bullets["count"]),
                        flat=tuple(bullets.get("flat", ())),
                        nested=tuple(bullets.get("nested", ())),
                    )
                    if bullets
                    else None
                ),
            )
        )

    lists = tuple(
        ListSpec(
            name=name,
            count=int(spec["count"]),
            list_keys=tuple(spec.get("list_keys", ())),
            indexed_prefixes=tuple(spec.get("indexed_prefixes", ())),
            free_text_keys=tuple(spec.get("free_text_keys", ())),
        )
        for name, spec in settings["lists"].items()
    )

    budgets = {
        key: FieldBudget(max_chars=int(spec["max_chars"]), max_lines=spec.get("max_lines"))
        for key, spec in settings["budgets"].items()
    }

    return PipelineConfig(
        clamp_enabled=bool(settings["clamp_enabled"]),
        envelope_keys=tuple(settings["envelope_keys"]),
        scalars=_frozen({key: tuple(aliases) for key, aliases in settings["scalars"].items()}),
        contact_keys=tuple(settings["contact"]["keys"]),
        contact_fields=_frozen(
            {key: tuple(aliases) for key, aliases in settings["contact"]["fields"].items()}
        ),
        blocks=tuple(blocks),
        lists=lists,
        budgets=_frozen(budgets),
        photo_inline_keys=tuple(settings["photo"]["inline_keys"]),
        photo_url_keys=tuple(settings["photo"]["url_keys"]),
        photo_size_px=int(settings["photo"]["size_px"]),
        max_redirects=int(settings["fetch"]["max_redirects"]),
        fetch_timeout_s=float(settings["fetch"]["timeout_s"]),
    )


def load_budget_profiles(config_path: Path = None) -> Dict[str, Any]:
    """
    Load budget_profiles.yaml and return its profiles section.

    Args:
        config_path: Optional path to the YAML file (defaults to BUDGET_PROFILES_PATH)

    Returns:
        Dict mapping profile names to partial settings trees
    """
    if config_path is None:
        config_path = BUDGET_PROFILES_PATH

    loaded = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    return loaded.get("profiles") or {}


def load_pipeline_config(
    profile: Optional[str] = None,
    config_path: Path = None,
    **overrides: Any,
) -> PipelineConfig:
    """
    Build a PipelineConfig from defaults, an optional named profile, and keyword overrides.

    Later sources override earlier ones: defaults < profile < overrides.

    Args:
        profile: Profile name in the budget profiles YAML (None for defaults only)
        config_path: Optional path to the budget profiles YAML
        **overrides: Top-level settings to override (e.g., clamp_enabled=False)

    Returns:
        Frozen PipelineConfig

    Raises:
        ValueError: If the profile is not defined in the YAML file
    """
    settings = OmegaConf.create(get_default_settings())
    settings.clamp_enabled = CLAMP_ENABLED

    if profile is not None:
        profiles = load_budget_profiles(config_path)
        if profile not in profiles:
            available = list(profiles.keys())
            raise ValueError(f"Budget profile '{profile}' not found. Available profiles: {available}")
        settings = OmegaConf.merge(settings, OmegaConf.create(profiles[profile]))

    if overrides:
        settings = OmegaConf.merge(settings, OmegaConf.create(overrides))

    return build_pipeline_config(OmegaConf.to_container(settings, resolve=True))


@lru_cache(maxsize=1)
def get_default_config() -> PipelineConfig:
    """Return the process-wide default PipelineConfig (built on first use)."""
    return load_pipeline_config()
