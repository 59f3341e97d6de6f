"""
ONIX Books Sync - Pydantic Models
Data models for extracted products, store rows and import summaries.
"""

from enum import Enum
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """ONIX notification codes the synchronizer acts on."""
    NEW = "01"
    UPDATE = "03"
    DELETE = "05"
    OTHER = "other"     # any code without a defined action

    @classmethod
    def from_code(cls, code: Optional[str]) -> "NotificationType":
        """Map a raw ONIX code to a NotificationType, OTHER if unknown."""
        for member in (cls.NEW, cls.UPDATE, cls.DELETE):
            if code == member.value:
                return member
        return cls.OTHER


class SyncOutcome(str, Enum):
    """What a single record did to the books table."""
    INSERTED = "inserted"     # New, row created
    SKIPPED = "skipped"       # New, key already present
    UPSERTED = "upserted"     # Update, row created or overwritten
    DELETED = "deleted"       # Delete, row removed
    NOT_FOUND = "not_found"   # Delete, key not present
    IGNORED = "ignored"       # notification code without action


# Column order of the books table (without the surrogate id)
BOOK_COLUMNS = (
    "record_reference",
    "isbn",
    "title",
    "price",
    "author",
    "coverlink",
    "zusatztext",
    "inhalt",
    "autorenportrait",
    "language",
)


class ProductRecord(BaseModel):
    """One non-ebook <Product> as extracted from an ONIX 3.0 file."""
    record_reference: str
    notification_type: str
    title: str = ""
    isbn: Optional[str] = None
    price: Optional[str] = None           # decimal kept as the feed's string
    author: str = ""
    coverlink: Optional[str] = None
    promotional_text: Optional[str] = None
    description: Optional[str] = None
    author_biography: Optional[str] = None
    language: Optional[str] = None

    @property
    def notification(self) -> NotificationType:
        return NotificationType.from_code(self.notification_type)

    def as_row(self) -> Dict[str, Optional[str]]:
        """Project the record onto the books table columns."""
        return {
            "record_reference": self.record_reference,
            "isbn": self.isbn,
            "title": self.title,
            "price": self.price,
            "author": self.author,
            "coverlink": self.coverlink,
            "zusatztext": self.promotional_text,
            "inhalt": self.description,
            "autorenportrait": self.author_biography,
            "language": self.language,
        }


class BookRow(BaseModel):
    """A row read back from the books table."""
    id: int
    record_reference: str
    isbn: Optional[str] = None
    title: Optional[str] = None
    price: Optional[str] = None
    author: Optional[str] = None
    coverlink: Optional[str] = None
    zusatztext: Optional[str] = None
    inhalt: Optional[str] = None
    autorenportrait: Optional[str] = None
    language: Optional[str] = None


class FileResult(BaseModel):
    """Result of importing one ONIX file."""
    filename: str
    records: int = 0
    outcomes: Dict[SyncOutcome, int] = Field(default_factory=dict)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def count(self, outcome: SyncOutcome):
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1


class ImportSummary(BaseModel):
    """Summary of a whole import run."""
    started_at: datetime = Field(default_factory=datetime.now)
    files: List[FileResult] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def files_failed(self) -> int:
        return sum(1 for f in self.files if not f.success)

    @property
    def total_records(self) -> int:
        return sum(f.records for f in self.files)

    def total(self, outcome: SyncOutcome) -> int:
        """Count of records with the given outcome across all files."""
        return sum(f.outcomes.get(outcome, 0) for f in self.files)
