"""
Intake Context

Responsibilities:
- Detects the shape of incoming form submissions (flat, nested, enveloped)
- Canonicalizes submissions into one flat record
- Resolves fields through prioritized alias lists
- Acquires the résumé photo (inline base64 or remote URL)

Owns: Submission shapes, alias resolution, photo acquisition
Never: Decides how text is fitted or rendered
"""

from vitae.contexts.intake.exceptions import PhotoDownloadError, TooManyRedirectsError
from vitae.contexts.intake.field_resolver import collect_indexed, resolve, split_free_text
from vitae.contexts.intake.photo import (
    PhotoResolution,
    decode_inline,
    fetch_bytes,
    normalize_share_url,
    resolve_photo,
)
from vitae.contexts.intake.submission_shapes import (
    CanonicalRecord,
    SubmissionShape,
    canonicalize,
    detect_shape,
)

__all__ = [
    # Field resolution
    "resolve",
    "collect_indexed",
    "split_free_text",
    # Submission shapes
    "SubmissionShape",
    "CanonicalRecord",
    "detect_shape",
    "canonicalize",
    # Photo acquisition
    "PhotoResolution",
    "decode_inline",
    "normalize_share_url",
    "fetch_bytes",
    "resolve_photo",
    "PhotoDownloadError",
    "TooManyRedirectsError",
]
