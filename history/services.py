"""History log writer.

Appending is best-effort relative to the caller's transition: the insert runs
in a savepoint, and a database failure is logged at ERROR instead of rolling
back the stock or status change that already happened.
"""

import logging

from django.db import DatabaseError, transaction

from .models import HistoryEntry

logger = logging.getLogger("assetdesk.history")


def record_event(
    *,
    action_type: str,
    employee_id: int | None,
    item_id: int | None,
    quantity: int = 0,
    notes: str = "",
    performed_by_id: int | None = None,
    reference: str = "",
) -> HistoryEntry | None:
    context = {
        "action_type": action_type,
        "employee_id": employee_id,
        "item_id": item_id,
        "quantity": quantity,
        "reference": reference,
    }
    try:
        with transaction.atomic():
            entry = HistoryEntry.objects.create(
                action_type=action_type,
                employee_id=employee_id,
                item_id=item_id,
                quantity=quantity,
                notes=notes or "",
                performed_by_id=performed_by_id,
                reference=reference,
            )
    except DatabaseError:
        logger.error("history.append_failed", exc_info=True, extra=context)
        return None
    logger.info("history.appended", extra={**context, "entry_id": entry.id})
    return entry


# EOF
