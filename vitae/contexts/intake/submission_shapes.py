"""
Submission Shape Canonicalization

Form submissions arrive in three shapes:

1. Flat: every field is a top-level key ({"name": ..., "exp_1_company": ...})
2. Nested: a "contact" sub-object and arrays of objects for experience,
   education and references ({"experience": [{"company": ..., "bullets": [...]}]})
3. Enveloped: either of the above wrapped under a single key ({"data": {...}})

detect_shape() names the shape and canonicalize() turns any of them (or a mix)
into one flat record, so field resolution downstream never needs to know
where a value came from. Flat keys always win over values derived from nested
objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from vitae.contexts.intake.field_resolver import is_blank, resolve, split_free_text
from vitae.contexts.intake.logger import log_shape_detected


class SubmissionShape(Enum):
    """Layout of an incoming submission."""

    FLAT = "flat"
    NESTED = "nested"
    ENVELOPED = "enveloped"


@dataclass
class CanonicalRecord:
    """Flat record produced by canonicalize(), tagged with the detected shape."""

    shape: SubmissionShape
    record: Dict[str, Any]


def _unwrap_envelope(raw: Mapping[str, Any], envelope_keys: Sequence[str]) -> Optional[Mapping[str, Any]]:
    for key in envelope_keys:
        value = raw.get(key)
        if isinstance(value, Mapping):
            return value
    return None


def _has_nested_content(source: Mapping[str, Any], config) -> bool:
    for key in config.contact_keys:
        if isinstance(source.get(key), Mapping):
            return True
    for block in config.blocks:
        for key in block.array_keys:
            value = source.get(key)
            if isinstance(value, list) and any(isinstance(item, Mapping) for item in value):
                return True
    return False


def detect_shape(raw: Any, config) -> SubmissionShape:
    """
    Identify the layout of a raw submission.

    An envelope is recognized first; otherwise a submission with a contact
    sub-object or block arrays of objects is nested, and anything else is flat.
    Mixed submissions (nested arrays plus flat overrides) report NESTED.

    Args:
        raw: Submission as decoded from JSON
        config: PipelineConfig providing envelope, contact and block keys

    Returns:
        SubmissionShape
    """
    if not isinstance(raw, Mapping):
        return SubmissionShape.FLAT
    if _unwrap_envelope(raw, config.envelope_keys) is not None:
        return SubmissionShape.ENVELOPED
    if _has_nested_content(raw, config):
        return SubmissionShape.NESTED
    return SubmissionShape.FLAT


def _fill(record: Dict[str, Any], target_key: str, flat_aliases: Sequence[str], value: Any) -> None:
    """Place a nested value under target_key unless a flat alias already supplies it."""
    if is_blank(value):
        return
    if is_blank(resolve(record, flat_aliases, None)):
        record[target_key] = value


def _flatten_contact(source: Mapping[str, Any], record: Dict[str, Any], config) -> None:
    for key in config.contact_keys:
        contact = source.get(key)
        if not isinstance(contact, Mapping):
            continue
        for field_name, nested_aliases in config.contact_fields.items():
            target_key = f"contact_{field_name}"
            flat_aliases = config.scalars.get(target_key, (target_key,))
            _fill(record, target_key, flat_aliases, resolve(contact, nested_aliases, None))
        return


def _entry_dates(entry: Mapping[str, Any]) -> str:
    """Compose a date range from start/end keys when no single dates value exists."""
    start = resolve(entry, ("start", "start_date", "desde", "inicio"), "")
    end = resolve(entry, ("end", "end_date", "hasta", "fin"), "")
    if start and end:
        return f"{start} - {end}"
    return str(start or end)


def _flatten_block(source: Mapping[str, Any], record: Dict[str, Any], block) -> None:
    entries = None
    for key in block.array_keys:
        if isinstance(source.get(key), list):
            entries = source[key]
            break
    if not entries:
        return

    for index, entry in enumerate(entries[: block.count], start=1):
        if not isinstance(entry, Mapping):
            continue

        for field_name, spec in block.fields.items():
            value = resolve(entry, spec.nested, None)
            if is_blank(value) and field_name in ("dates", "years"):
                value = _entry_dates(entry)
            flat_aliases = [pattern.format(n=index) for pattern in spec.flat]
            _fill(record, f"{block.prefix}_{index}_{field_name}", flat_aliases, value)

        if block.bullets is None:
            continue
        bullets = []
        for key in block.bullets.nested:
            if key in entry and not is_blank(entry[key]):
                bullets = _split_bullets(entry[key])
                break
        for bullet_index, bullet in enumerate(bullets[: block.bullets.count], start=1):
            flat_aliases = [
                pattern.format(n=index, m=bullet_index) for pattern in block.bullets.flat
            ]
            _fill(record, f"{block.prefix}_{index}_b{bullet_index}", flat_aliases, bullet)


def _split_bullets(value: Any) -> list:
    # Commas are part of bullet sentences, so strings only split on lines and bullet marks
    if isinstance(value, str):
        lines = (line.strip(" -*\t") for line in value.replace("•", "\n").splitlines())
        return [line for line in lines if line]
    return split_free_text(value)


def canonicalize(raw: Any, config) -> CanonicalRecord:
    """
    Convert a submission of any shape into one flat record.

    Never raises: a non-mapping submission yields an empty flat record.

    Args:
        raw: Submission as decoded from JSON
        config: PipelineConfig

    Returns:
        CanonicalRecord with the detected shape and the flat record

    Example:
        >>> canonicalize({"data": {"experience": [{"company": "ACME"}]}}, config).record
        {'experience': [{'company': 'ACME'}], 'exp_1_company': 'ACME'}
    """
    shape = detect_shape(raw, config)
    if not isinstance(raw, Mapping):
        return CanonicalRecord(shape=shape, record={})

    source = raw
    if shape is SubmissionShape.ENVELOPED:
        source = _unwrap_envelope(raw, config.envelope_keys)

    record = dict(source)
    _flatten_contact(source, record, config)
    for block in config.blocks:
        _flatten_block(source, record, block)

    log_shape_detected(shape, len(record))
    return CanonicalRecord(shape=shape, record=record)
