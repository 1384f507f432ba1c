"""Procurement models: requests, invoices, their attachments and the event log."""

from sqlalchemy import Column, Integer, String, Text, BigInteger, Numeric, DateTime, ForeignKey, func
from foodtech.db.base import Base


class PurchaseRequest(Base):
    """Purchase request; status transitions are owned by stored procedures."""
    __tablename__ = "purchase_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(50), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=False, default="draft")
    created_by = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class PurchaseInvoice(Base):
    """Supplier invoice, optionally linked to a purchase request."""
    __tablename__ = "purchase_invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(50), nullable=True, index=True)
    request_id = Column(Integer, ForeignKey("purchase_requests.id"), nullable=True)
    supplier_name = Column(String(255), nullable=True)
    amount = Column(Numeric(14, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="UAH")
    status = Column(String(50), nullable=False, default="draft")
    created_by = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)


class PurchaseLog(Base):
    """Append-only log of procurement actions, written by ``log_purchase_event``."""
    __tablename__ = "purchase_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String(20), nullable=False)  # request, invoice
    entity_id = Column(Integer, nullable=False)
    action = Column(String(100), nullable=False)
    comment = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=True, index=True)
    user_email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)


class PurchaseRequestAttachment(Base):
    """Metadata row for a file attached to a purchase request."""
    __tablename__ = "purchase_request_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey("purchase_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(500), nullable=False)
    file_path = Column(String(1000), nullable=False)
    file_type = Column(String(150), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    uploaded_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)


class PurchaseInvoiceAttachment(Base):
    """Metadata row for a file attached to a purchase invoice."""
    __tablename__ = "purchase_invoice_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_id = Column(Integer, ForeignKey("purchase_invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(500), nullable=False)
    file_path = Column(String(1000), nullable=False)
    file_type = Column(String(150), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    uploaded_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
