"""
Template Data Normalization

Turns a raw form submission into the complete, fitted field map a
presentation template consumes.

Pipeline:
1. Canonicalize the submission shape (flat / nested / enveloped)
2. Resolve scalar fields through their alias lists and fit them to budget
3. Resolve repeated blocks (experience, education, references) and bullets
4. Build fixed-size lists from explicit lists, numbered items, or free text
5. Fill every missing schema key with ""
6. Resolve the photo (the only step that may wait on the network)

Steps 1-5 are synchronous and never raise; step 6 reports download problems
through NormalizedFields.photo_error instead of raising.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import httpx

from vitae.contexts.intake.field_resolver import collect_indexed, resolve, split_free_text
from vitae.contexts.intake.photo import resolve_photo
from vitae.contexts.intake.submission_shapes import CanonicalRecord, SubmissionShape, canonicalize
from vitae.contexts.templating.config_resolver import FieldBudget, get_default_config
from vitae.contexts.templating.logger import log_normalization_result
from vitae.contexts.templating.schema import PHOTO_KEY, schema_keys
from vitae.contexts.templating.text_fitting import clamp_plain, clamp_wrapped
from vitae.utils.text_processing import collapse_whitespace


@dataclass(frozen=True)
class NormalizedFields:
    """
    Result of normalize(): one read-only field map per submission.

    Attributes:
        fields: Schema key -> fitted text ("" when absent)
        photo: Image bytes for the photo slot, or None
        photo_source: "inline", "url", or None
        photo_error: Soft-failure description from photo acquisition
        shape: Detected submission shape
    """

    fields: Mapping[str, str]
    photo: Optional[bytes] = None
    photo_source: Optional[str] = None
    photo_error: Optional[str] = None
    shape: SubmissionShape = SubmissionShape.FLAT

    def __getitem__(self, key: str) -> Any:
        if key == PHOTO_KEY:
            return self.photo
        return self.fields[key]

    def __contains__(self, key: str) -> bool:
        return key == PHOTO_KEY or key in self.fields

    def as_template_data(self) -> Dict[str, Any]:
        """Return a fresh dict of all text fields plus the photo slot."""
        data: Dict[str, Any] = dict(self.fields)
        data[PHOTO_KEY] = self.photo
        return data


def fit_text(value: Any, budget: Optional[FieldBudget], enabled: bool = True) -> str:
    """
    Fit a value to its budget.

    Args:
        value: Resolved raw value
        budget: FieldBudget (None leaves the text unbounded)
        enabled: Global clamping switch

    Returns:
        Fitted text
    """
    if budget is None:
        return collapse_whitespace(value)
    if budget.max_lines is None:
        return clamp_plain(value, budget.max_chars, enabled)
    return clamp_wrapped(value, budget.max_chars, budget.max_lines, enabled)


def _list_items(record: Mapping[str, Any], list_spec) -> List[str]:
    """Explicit list > numbered items > free text split on delimiters."""
    for key in list_spec.list_keys:
        value = record.get(key)
        if isinstance(value, (list, tuple)):
            items = split_free_text(value)
            if items:
                return items

    for prefix in list_spec.indexed_prefixes:
        items = collect_indexed(record, prefix, list_spec.count)
        if items:
            return items

    for key in list_spec.list_keys + list_spec.free_text_keys:
        items = split_free_text(record.get(key))
        if items:
            return items

    return []


def _normalize_record(canonical: CanonicalRecord, config) -> Dict[str, str]:
    record = canonical.record
    enabled = config.clamp_enabled
    out: Dict[str, str] = {}

    for key, aliases in config.scalars.items():
        out[key] = fit_text(resolve(record, aliases), config.budget_for(key), enabled)

    for block in config.blocks:
        bullet_budget = config.budget_for(f"{block.prefix}_bullet")
        for n in range(1, block.count + 1):
            for field_name, spec in block.fields.items():
                aliases = [pattern.format(n=n) for pattern in spec.flat]
                out[f"{block.prefix}_{n}_{field_name}"] = fit_text(
                    resolve(record, aliases),
                    config.budget_for(f"{block.prefix}_{field_name}"),
                    enabled,
                )
            if block.bullets is None:
                continue
            # Each bullet is fitted on its own; a long sibling never steals space
            for m in range(1, block.bullets.count + 1):
                aliases = [pattern.format(n=n, m=m) for pattern in block.bullets.flat]
                out[f"{block.prefix}_{n}_b{m}"] = fit_text(
                    resolve(record, aliases), bullet_budget, enabled
                )

    for list_spec in config.lists:
        items = _list_items(record, list_spec)[: list_spec.count]
        budget = config.budget_for(list_spec.name)
        for i, item in enumerate(items, start=1):
            out[f"{list_spec.name}_{i}"] = fit_text(item, budget, enabled)

    # Fill-missing pass: every schema key exists, "" marks absence
    for key in schema_keys(config):
        out.setdefault(key, "")

    return out


def normalize_fields(raw: Any, config=None) -> Dict[str, str]:
    """
    Normalize the text part of a submission (no photo, no I/O).

    Args:
        raw: Submission in any accepted shape
        config: PipelineConfig (defaults to get_default_config())

    Returns:
        Dict with every schema key mapped to fitted text
    """
    config = config or get_default_config()
    return _normalize_record(canonicalize(raw, config), config)


async def normalize(
    raw: Any,
    config=None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> NormalizedFields:
    """
    Normalize a submission into the complete field map plus resolved photo.

    Args:
        raw: Submission in any accepted shape
        config: PipelineConfig (defaults to get_default_config())
        client: Optional AsyncClient used for the photo download

    Returns:
        NormalizedFields with every schema key present

    Example:
        >>> normalized = asyncio.run(normalize({"name": "Ana  Pérez", "skills": ["Go"]}))
        >>> normalized["name"], normalized["skill_1"], normalized["skill_2"]
        ('Ana Pérez', 'Go', '')
    """
    config = config or get_default_config()
    canonical = canonicalize(raw, config)
    fields = _normalize_record(canonical, config)
    photo = await resolve_photo(canonical.record, config, client=client)

    normalized = NormalizedFields(
        fields=MappingProxyType(fields),
        photo=photo.data,
        photo_source=photo.source,
        photo_error=photo.error,
        shape=canonical.shape,
    )
    log_normalization_result(normalized, config.clamp_enabled)
    return normalized
