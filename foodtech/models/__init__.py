"""Models package: import all models so metadata.create_all can discover them."""

from foodtech.models.profile import Profile
from foodtech.models.purchase import (
    PurchaseRequest, PurchaseInvoice, PurchaseLog,
    PurchaseRequestAttachment, PurchaseInvoiceAttachment,
)
from foodtech.models.rd import (
    RdRequest, RequestEvent, RdRequestAttachment,
    DevelopmentSample, DevelopmentSampleLabResult, DevelopmentSamplePilot,
)
from foodtech.models.kb import KBDocument, KBCategory, KBStatus, KBIndexStatus

__all__ = [
    "Profile",
    "PurchaseRequest", "PurchaseInvoice", "PurchaseLog",
    "PurchaseRequestAttachment", "PurchaseInvoiceAttachment",
    "RdRequest", "RequestEvent", "RdRequestAttachment",
    "DevelopmentSample", "DevelopmentSampleLabResult", "DevelopmentSamplePilot",
    "KBDocument", "KBCategory", "KBStatus", "KBIndexStatus",
]
