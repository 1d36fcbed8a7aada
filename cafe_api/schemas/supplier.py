import uuid
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SupplierRequest(BaseModel):
    name: str = Field(..., min_length=1)
    contact_person: str = ""
    email: str = Field(..., min_length=3)
    phone: str = ""
    address: Optional[str] = None


class SupplierResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    contact_person: str
    email: str
    phone: str
    address: Optional[str] = None
