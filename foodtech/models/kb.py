"""Knowledge-base document model."""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, func
from foodtech.db.base import Base


class KBCategory(str, enum.Enum):
    SOP = "SOP"
    OrgStructure = "OrgStructure"
    Policy = "Policy"
    Instructions = "Instructions"
    BusinessProcess_BPMN = "BusinessProcess_BPMN"
    BusinessProcess_Text = "BusinessProcess_Text"


class KBStatus(str, enum.Enum):
    active = "active"
    archived = "archived"


class KBIndexStatus(str, enum.Enum):
    not_indexed = "not_indexed"
    pending = "pending"
    indexed = "indexed"
    error = "error"


class KBDocument(Base):
    """Knowledge-base document; indexing runs in an external workflow."""
    __tablename__ = "kb_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(500), nullable=False)
    category = Column(Enum(KBCategory), nullable=False)
    version = Column(String(50), nullable=True)
    status = Column(Enum(KBStatus), nullable=False, default=KBStatus.active)
    access_level = Column(String(50), nullable=False, default="open")
    storage_bucket = Column(String(255), nullable=True)
    storage_path = Column(String(1000), nullable=True)
    mime_type = Column(String(150), nullable=True)
    raw_text = Column(Text, nullable=True)
    index_status = Column(Enum(KBIndexStatus), nullable=False, default=KBIndexStatus.not_indexed)
    indexed_at = Column(DateTime, nullable=True)
    index_error = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False, index=True)
