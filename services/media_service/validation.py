"""Upload allow-lists per asset category."""

import os
from dataclasses import dataclass

from fastapi import UploadFile
from libs.common.errors import ValidationError

MB = 1024 * 1024


@dataclass(frozen=True)
class CategoryRule:
    extensions: frozenset[str]
    max_bytes: int


ASSET_CATEGORIES: dict[str, CategoryRule] = {
    "video": CategoryRule(
        frozenset({".mp4", ".mov", ".avi", ".wmv", ".webm", ".mkv"}), 500 * MB
    ),
    "image": CategoryRule(
        frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"}), 10 * MB
    ),
    "document": CategoryRule(
        frozenset({".pdf", ".doc", ".docx", ".txt", ".ppt", ".pptx", ".xls", ".xlsx"}),
        50 * MB,
    ),
    "audio": CategoryRule(
        frozenset({".mp3", ".wav", ".m4a", ".ogg", ".flac", ".aac"}), 100 * MB
    ),
    "avatar": CategoryRule(
        frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"}), 5 * MB
    ),
}


def validate_upload(category: str, filename: str, size: int) -> str:
    """
    Check an upload against its category's rules.

    Returns the normalized (lower-case) extension to store the file under.
    """
    rule = ASSET_CATEGORIES.get(category)
    if rule is None:
        raise ValidationError(f"Unknown asset category: {category}")
    if size <= 0:
        raise ValidationError("File is empty")

    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in rule.extensions:
        allowed = ", ".join(sorted(rule.extensions))
        raise ValidationError(
            f"File type {extension or '(none)'} is not allowed for {category}. Allowed: {allowed}"
        )
    if size > rule.max_bytes:
        raise ValidationError(
            f"File exceeds the {rule.max_bytes // MB} MB limit for {category}"
        )
    return extension


async def read_upload(category: str, file: UploadFile) -> bytes:
    """Read an upload, rejecting it by its declared size before buffering it."""
    if file.size is not None:
        validate_upload(category, file.filename or "", file.size)
    return await file.read()
