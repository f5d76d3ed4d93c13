"""Enum definitions for video review models."""

import enum


class ReviewStatus(str, enum.Enum):
    OPEN = "open"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReviewAction(str, enum.Enum):
    ACCEPT = "accept"
    COMPLETE = "complete"
    CANCEL = "cancel"
