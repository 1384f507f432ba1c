"""Pilot tasting sheets: one per development sample, scored 1 to 10."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from foodtech.models.rd import DevelopmentSamplePilot
from foodtech.services.workflow_store import workflow_store

SCORE_MIN = 1
SCORE_MAX = 10

HEADER_FIELDS = ("tasting_sheet_no", "tasting_date", "direction", "tasting_goal")


@dataclass(frozen=True)
class PilotScoreField:
    key: str
    label: str
    required: bool = False


PILOT_SCORE_FIELDS = (
    PilotScoreField("score_appearance", "Appearance"),
    PilotScoreField("score_color", "Color"),
    PilotScoreField("score_aroma", "Aroma"),
    PilotScoreField("score_taste", "Taste"),
    PilotScoreField("score_consistency", "Consistency"),
    PilotScoreField("score_juiciness", "Juiciness"),
    PilotScoreField("score_break_moisture", "Moisture at break"),
    PilotScoreField("score_syneresis", "Syneresis (broth formation)"),
    PilotScoreField("score_curl_formation", "Curl formation"),
    PilotScoreField("score_cut_pattern", "Pattern at break"),
    PilotScoreField("score_fibers", "Fibers present"),
    PilotScoreField("score_structure_density", "Structure density"),
    PilotScoreField("score_air_inclusions", "Air inclusions"),
    PilotScoreField("score_overall", "Overall product score", required=True),
)

EDITABLE_FIELDS = HEADER_FIELDS + tuple(f.key for f in PILOT_SCORE_FIELDS) + ("comment",)


def validate_pilot_results(record) -> Tuple[bool, Optional[str]]:
    """The overall score must be present and within range before results are fixed."""
    if record is None:
        return False, "Fill in the tasting sheet first"

    overall = record.get("score_overall") if isinstance(record, dict) else getattr(record, "score_overall", None)
    if overall is None:
        return False, 'The "Overall product score" is required to record results'
    if overall < SCORE_MIN or overall > SCORE_MAX:
        return False, f"Overall product score must be between {SCORE_MIN} and {SCORE_MAX}"
    return True, None


class PilotResultsService:

    @staticmethod
    def fetch(db: Session, sample_id: int) -> Optional[DevelopmentSamplePilot]:
        return (
            db.query(DevelopmentSamplePilot)
            .filter(DevelopmentSamplePilot.sample_id == sample_id)
            .first()
        )

    @staticmethod
    def upsert(db: Session, sample_id: int, values: Dict[str, Any]) -> DevelopmentSamplePilot:
        record = PilotResultsService.fetch(db, sample_id)
        if record is None:
            record = DevelopmentSamplePilot(sample_id=sample_id)
            db.add(record)
        for key, value in values.items():
            if key in EDITABLE_FIELDS:
                setattr(record, key, value)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def initialize(db: Session, sample_id: int) -> DevelopmentSamplePilot:
        """Open a tasting sheet numbered by the database sequence, dated today."""
        record = PilotResultsService.fetch(db, sample_id)
        if record is not None:
            return record

        sheet_no = workflow_store.generate_tasting_sheet_number(db)
        record = DevelopmentSamplePilot(
            sample_id=sample_id,
            tasting_sheet_no=sheet_no,
            tasting_date=date.today(),
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record


pilot_results_service = PilotResultsService()
