"""Workflow store: named stored procedures that own status transitions.

The application never reimplements these state machines; it calls the
procedure by name and trusts its result.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from foodtech.core.exceptions import WorkflowError

logger = logging.getLogger("foodtech")


class WorkflowStore:
    """Invokes database functions through ``SELECT proc(:p_arg, ...)``, arguments in order."""

    @staticmethod
    def call(db: Session, name: str, **args: Any) -> Any:
        """Run a procedure and return its single result value.

        JSON results are decoded. Raises WorkflowError with the database's
        message when the procedure rejects the call.
        """
        placeholders = ", ".join(f":{key}" for key in args)
        params = {
            key: json.dumps(value) if isinstance(value, (dict, list)) else value
            for key, value in args.items()
        }
        try:
            result = db.execute(text(f"SELECT {name}({placeholders})"), params).scalar()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error("Procedure %s failed: %s", name, message)
            raise WorkflowError(message)

        if isinstance(result, str) and result[:1] in ("{", "["):
            return json.loads(result)
        return result

    def create_development_recipe(self, db: Session, request_id: int) -> Any:
        return self.call(db, "create_development_recipe", p_request_id=request_id)

    def copy_development_recipe(self, db: Session, recipe_id: int) -> Any:
        return self.call(db, "copy_development_recipe", p_recipe_id=recipe_id)

    def generate_tasting_sheet_number(self, db: Session) -> str:
        return self.call(db, "generate_tasting_sheet_number")

    def enqueue_notification_event(
        self,
        db: Session,
        event_type: str,
        payload: Dict[str, Any],
        event_id: Optional[str] = None,
        recipient_profile_ids: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """Create pending outbox records for every recipient matched by the active rules.

        Returns counts of rules matched, recipients enqueued and duplicates skipped.
        """
        return self.call(
            db,
            "enqueue_notification_event",
            p_event_type=event_type,
            p_payload=payload,
            p_event_id=event_id,
            p_recipient_profile_ids=recipient_profile_ids,
        )

    def set_sample_testing_result(
        self, db: Session, testing_sample_id: int, result: str, comment: Optional[str] = None,
    ) -> Any:
        return self.call(
            db,
            "set_sample_testing_result",
            p_testing_sample_id=testing_sample_id,
            p_result=result,
            p_comment=comment,
        )

    def decline_request_from_testing(self, db: Session, request_id: int, reason: str) -> Any:
        return self.call(db, "decline_request_from_testing", p_request_id=request_id, p_reason=reason)

    def log_purchase_event(
        self, db: Session, entity_type: str, entity_id: int, action: str, comment: Optional[str] = None,
    ) -> Any:
        return self.call(
            db,
            "log_purchase_event",
            p_entity_type=entity_type,
            p_entity_id=entity_id,
            p_action=action,
            p_comment=comment,
        )


workflow_store = WorkflowStore()
