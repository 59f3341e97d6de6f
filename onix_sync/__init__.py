"""
ONIX Books Sync - onix_sync package
"""

from .parser import OnixParser, first_match
from .database import BookDatabase, open_database
from .sync import BookSynchronizer
from .importer import OnixImporter, discover_files
from .models import ProductRecord, BookRow, NotificationType, SyncOutcome, ImportSummary

__all__ = [
    "OnixParser",
    "first_match",
    "BookDatabase",
    "open_database",
    "BookSynchronizer",
    "OnixImporter",
    "discover_files",
    "ProductRecord",
    "BookRow",
    "NotificationType",
    "SyncOutcome",
    "ImportSummary",
]
