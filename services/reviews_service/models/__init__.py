"""Reviews Service models package."""

from services.reviews_service.models.core import VideoReviewRequest
from services.reviews_service.models.enums import ReviewAction, ReviewStatus

__all__ = [
    "ReviewAction",
    "ReviewStatus",
    "VideoReviewRequest",
]
