"""
ONIX Books Sync - Book Synchronizer
Applies extracted ONIX records to the books table by notification type.
"""

import logging

from .models import NotificationType, ProductRecord, SyncOutcome
from .database import BookDatabase

logger = logging.getLogger(__name__)


class BookSynchronizer:
    """
    Applies one ProductRecord at a time to a BookDatabase.

    | code | action                                   |
    |------|------------------------------------------|
    | 01   | insert, skipped if the key exists        |
    | 03   | insert or overwrite every column         |
    | 05   | delete, no-op if the key does not exist  |
    | else | nothing                                  |

    Store errors propagate to the caller.
    """

    def __init__(self, db: BookDatabase):
        self.db = db
        self._actions = {
            NotificationType.NEW: self._apply_new,
            NotificationType.UPDATE: self._apply_update,
            NotificationType.DELETE: self._apply_delete,
        }

    def apply(self, record: ProductRecord) -> SyncOutcome:
        """Apply record to the store and report what happened."""
        action = self._actions.get(record.notification)
        if action is None:
            logger.debug(
                f"Record {record.record_reference}: IGNORED "
                f"(notification type {record.notification_type!r})",
                extra={
                    "record_reference": record.record_reference,
                    "notification_type": record.notification_type,
                },
            )
            return SyncOutcome.IGNORED

        outcome = action(record)
        logger.debug(
            f"Record {record.record_reference}: {outcome.name}",
            extra={
                "record_reference": record.record_reference,
                "notification_type": record.notification_type,
            },
        )
        return outcome

    def _apply_new(self, record: ProductRecord) -> SyncOutcome:
        if self.db.insert_new(record):
            return SyncOutcome.INSERTED
        return SyncOutcome.SKIPPED

    def _apply_update(self, record: ProductRecord) -> SyncOutcome:
        self.db.upsert(record)
        return SyncOutcome.UPSERTED

    def _apply_delete(self, record: ProductRecord) -> SyncOutcome:
        if self.db.delete(record.record_reference):
            return SyncOutcome.DELETED
        return SyncOutcome.NOT_FOUND
