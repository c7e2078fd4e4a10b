"""
Template Schema

Enumerates the fixed, finite set of schema keys a PipelineConfig defines.
Templates may only reference these keys (plus the photo image slot); the
normalization pipeline guarantees every one of them is present.
"""

from typing import List

PHOTO_KEY = "photo"


def block_keys(block) -> List[str]:
    """All keys of one repeated block, e.g. exp_1_company ... exp_2_b3."""
    keys = []
    for n in range(1, block.count + 1):
        for field_name in block.fields:
            keys.append(f"{block.prefix}_{n}_{field_name}")
        if block.bullets is not None:
            for m in range(1, block.bullets.count + 1):
                keys.append(f"{block.prefix}_{n}_b{m}")
    return keys


def list_keys(list_spec) -> List[str]:
    """All slot keys of one fixed-size list, e.g. skill_1 ... skill_7."""
    return [f"{list_spec.name}_{i}" for i in range(1, list_spec.count + 1)]


def schema_keys(config) -> List[str]:
    """
    Return every text schema key for a configuration, in template order.

    Args:
        config: PipelineConfig

    Returns:
        Ordered list of keys (the photo slot is not included)
    """
    keys = list(config.scalars)
    for block in config.blocks:
        keys.extend(block_keys(block))
    for list_spec in config.lists:
        keys.extend(list_keys(list_spec))
    return keys
