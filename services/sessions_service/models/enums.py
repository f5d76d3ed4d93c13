"""Enum definitions for sessions service models."""

import enum


class SessionStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class SessionAction(str, enum.Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
