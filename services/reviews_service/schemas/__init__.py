"""Reviews Service schemas package."""

from services.reviews_service.schemas.main import (
    VideoReviewComplete,
    VideoReviewRequestCreate,
    VideoReviewRequestResponse,
)

__all__ = [
    "VideoReviewComplete",
    "VideoReviewRequestCreate",
    "VideoReviewRequestResponse",
]
