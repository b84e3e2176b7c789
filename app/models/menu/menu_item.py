from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Text, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from app.models.base import Base
import uuid


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    workspace_id = Column(String, ForeignKey("workspaces.id"), nullable=False)
    workspace = relationship("Workspace", back_populates="menu_items")

    # Copied from the workspace at creation time. Renaming the workspace does not update it.
    workspace_name = Column(String, nullable=False)

    # Plain column, not a foreign key: deleting a parent leaves its children
    # pointing at a missing id, and they read back as roots.
    parent_item_id = Column(String, nullable=True)

    key = Column(String, nullable=True)
    name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    url = Column(String, nullable=True)
    application_id = Column(String, nullable=True)
    disabled = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, default=0, nullable=False)
    permission = Column(String, nullable=True)
    badge = Column(String, nullable=True)
    scope = Column(String, nullable=True)
    external = Column(Boolean, default=False, nullable=False)
    i18n = Column(JSON, nullable=True)  # locale -> label

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_menu_items_workspace", "workspace_id"),
        Index("idx_menu_items_parent", "parent_item_id"),
    )
