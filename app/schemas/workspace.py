from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class WorkspaceBase(BaseModel):
    name: str
    description: Optional[str] = None


class WorkspaceCreate(WorkspaceBase):
    pass


class WorkspaceRead(WorkspaceBase):
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
