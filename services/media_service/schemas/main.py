from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AssetResponse(BaseModel):
    id: int
    url: str
    asset_key: str
    file_name: str
    original_file_name: Optional[str] = None
    file_size: int
    content_type: Optional[str] = None
    category: str
    object_type: Optional[str] = None
    object_id: Optional[int] = None
    uploaded_by_user_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
