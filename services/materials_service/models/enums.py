"""Enum definitions for materials service models."""

import enum


class MaterialContentType(str, enum.Enum):
    TEXT = "text"
    VIDEO = "video"
    LINK = "link"
    DOCUMENT = "document"
