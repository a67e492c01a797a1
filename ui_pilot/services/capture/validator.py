"""
Capture input validation - an ordered, fail-fast gate over multipart fields
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from starlette.datastructures import UploadFile

ALLOWED_TYPES = frozenset({"image/png", "image/jpeg"})
MAX_IMAGE_BYTES = 5 * 1024 * 1024
MIN_GOAL_WORDS = 2

GOAL_TOO_SHORT = "Goal must be at least 2 words."
MISSING_IMAGE = "Missing image file."
UNSUPPORTED_TYPE = "Only PNG/JPG allowed."
TOO_LARGE = "File too large (max 5MB)."


@dataclass(frozen=True)
class Accepted:
    goal: str
    image: UploadFile


@dataclass(frozen=True)
class Rejected:
    reason: str
    status_code: int


ValidationOutcome = Union[Accepted, Rejected]


def file_size(upload: UploadFile) -> int:
    """Declared size of an upload, measured from the spooled file when unknown."""
    if upload.size is not None:
        return upload.size
    f = upload.file
    pos = f.tell()
    f.seek(0, os.SEEK_END)
    size = f.tell()
    f.seek(pos)
    return size


def validate_capture_form(form: Mapping[str, Any]) -> ValidationOutcome:
    """
    Validate the raw `goal` and `image` form fields.

    Checks run in order and the first failure wins:
    goal shape (400), image presence (400), MIME type (415), size (413).
    Type checks come first so no string or file operation touches a value
    of the wrong type; the image body is never read here.
    """
    goal_raw: Optional[Any] = form.get("goal")
    image_raw: Optional[Any] = form.get("image")

    if not isinstance(goal_raw, str) or len(goal_raw.split()) < MIN_GOAL_WORDS:
        return Rejected(GOAL_TOO_SHORT, 400)
    goal = goal_raw.strip()

    if not isinstance(image_raw, UploadFile):
        return Rejected(MISSING_IMAGE, 400)

    if image_raw.content_type not in ALLOWED_TYPES:
        return Rejected(UNSUPPORTED_TYPE, 415)

    if file_size(image_raw) > MAX_IMAGE_BYTES:
        return Rejected(TOO_LARGE, 413)

    return Accepted(goal=goal, image=image_raw)
