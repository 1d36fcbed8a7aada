import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    message: str
    type: str
    category: str
    target_role: str
    customer_id: Optional[str] = None
    related_id: Optional[str] = None
    is_read: bool
    created_at: datetime
