"""Lab results: one measurement record per development sample."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from foodtech.models.rd import DevelopmentSampleLabResult

EMPTY_LAB_RESULTS_MESSAGE = "Fill in at least one lab measurement"


@dataclass(frozen=True)
class LabFieldConfig:
    key: str
    label: str
    type: str  # number, text, textarea
    unit: Optional[str] = None


LAB_FIELDS = (
    LabFieldConfig("bulk_density_g_dm3", "Bulk density", "number", "g/dm³"),
    LabFieldConfig("appearance", "Appearance", "text"),
    LabFieldConfig("color", "Color", "text"),
    LabFieldConfig("smell", "Smell", "text"),
    LabFieldConfig("taste", "Taste", "text"),
    LabFieldConfig("chlorides_pct", "Chlorides mass fraction", "number", "%"),
    LabFieldConfig("phosphates_pct", "Phosphates content", "number", "%"),
    LabFieldConfig("moisture_pct", "Moisture", "number", "%"),
    LabFieldConfig("ph_value", "pH", "number"),
    LabFieldConfig("hydration", "Hydration", "text"),
    LabFieldConfig("gel_strength_g_cm3", "Gel strength", "number", "g/cm³"),
    LabFieldConfig("viscosity_cps", "Viscosity", "number", "cps"),
    LabFieldConfig("colority", "Colority", "number"),
    LabFieldConfig("additional_info", "Additional information", "textarea"),
)

NUMERIC_FIELDS = tuple(f.key for f in LAB_FIELDS if f.type == "number")
TEXT_FIELDS = tuple(f.key for f in LAB_FIELDS if f.type != "number")


def _value(record, key):
    if isinstance(record, dict):
        return record.get(key)
    return getattr(record, key, None)


def validate_lab_results(record) -> Tuple[bool, Optional[str]]:
    """A record is complete enough once any numeric or non-blank text field is set."""
    if record is None:
        return False, EMPTY_LAB_RESULTS_MESSAGE

    has_numeric = any(_value(record, key) is not None for key in NUMERIC_FIELDS)
    has_text = any(
        _value(record, key) is not None and str(_value(record, key)).strip()
        for key in TEXT_FIELDS
    )
    if has_numeric or has_text:
        return True, None
    return False, EMPTY_LAB_RESULTS_MESSAGE


class LabResultsService:

    @staticmethod
    def fetch(db: Session, sample_id: int) -> Optional[DevelopmentSampleLabResult]:
        return (
            db.query(DevelopmentSampleLabResult)
            .filter(DevelopmentSampleLabResult.sample_id == sample_id)
            .first()
        )

    @staticmethod
    def upsert(db: Session, sample_id: int, values: Dict[str, Any]) -> DevelopmentSampleLabResult:
        """Update the sample's record, creating it first if needed."""
        record = LabResultsService.fetch(db, sample_id)
        if record is None:
            record = DevelopmentSampleLabResult(sample_id=sample_id)
            db.add(record)
        for key, value in values.items():
            if key in NUMERIC_FIELDS or key in TEXT_FIELDS:
                setattr(record, key, value)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def initialize(db: Session, sample_id: int) -> DevelopmentSampleLabResult:
        """Create an empty record when a sample enters the lab stage."""
        record = LabResultsService.fetch(db, sample_id)
        if record is not None:
            return record
        record = DevelopmentSampleLabResult(sample_id=sample_id)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record


lab_results_service = LabResultsService()
