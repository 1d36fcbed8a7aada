from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
import uuid


def new_request_id() -> str:
    return uuid.uuid4().hex


class SuccessResponse(BaseModel):
    """Envelope for every successful API call: the payload sits under 'data'."""
    success: bool = True
    request_id: str = Field(default_factory=new_request_id)
    data: Optional[Any] = None


class ErrorDetail(BaseModel):
    code: str
    message: Any
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail
    request_id: str = Field(default_factory=new_request_id)

    def body(self) -> Dict[str, Any]:
        """JSON-ready dict; 'details' is left out when there are none."""
        return self.model_dump(mode="json", exclude_none=True)
