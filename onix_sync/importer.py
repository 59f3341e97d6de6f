"""
ONIX Books Sync - Folder Importer
Runs every ONIX file of a folder through the parser and the synchronizer.
"""

import logging
from pathlib import Path
from typing import List

from .models import FileResult, ImportSummary
from .parser import OnixParser
from .sync import BookSynchronizer
from .exceptions import ConfigurationError, DatabaseError, ParserError

logger = logging.getLogger(__name__)


def discover_files(folder: Path, pattern: str = "*.xml") -> List[Path]:
    """ONIX files in folder, sorted by file name. Hidden files are skipped."""
    folder = Path(folder)
    if not folder.is_dir():
        raise ConfigurationError(f"Input folder not found: {folder}", setting="input_dir")
    files = [
        p for p in folder.glob(pattern)
        if p.is_file() and not p.name.startswith(".")
    ]
    return sorted(files, key=lambda p: p.name)


class OnixImporter:
    """
    Imports ONIX files one at a time, records in document order.

    A file that cannot be parsed is reported and skipped, as is a record
    whose statement fails; the rest of the run continues. With fail_fast
    the first such error aborts the run instead. StoreConnectionError is
    never caught here.
    """

    def __init__(
        self,
        parser: OnixParser,
        synchronizer: BookSynchronizer,
        fail_fast: bool = False,
    ):
        self.parser = parser
        self.synchronizer = synchronizer
        self.fail_fast = fail_fast

    def import_folder(self, folder: Path) -> ImportSummary:
        """Import every *.xml file of folder in ascending file name order."""
        files = discover_files(folder)
        logger.info(f"📁 Found {len(files)} ONIX files in {folder}")

        summary = ImportSummary()
        for filepath in files:
            result = self.import_file(filepath)
            summary.files.append(result)
            if result.error:
                summary.errors.append(f"{result.filename}: {result.error}")
        return summary

    def import_file(self, filepath: Path) -> FileResult:
        """Parse one file and apply its records."""
        filepath = Path(filepath)
        result = FileResult(filename=filepath.name)
        logger.info(f"📥 Importing file: {filepath.name}", extra={"onix_file": filepath.name})

        try:
            records = self.parser.parse_file(filepath)
        except ParserError as e:
            if self.fail_fast:
                raise
            logger.error(f"❌ Skipping {filepath.name}: {e}", extra={"onix_file": filepath.name})
            result.error = str(e)
            return result

        failed = 0
        for record in records:
            try:
                outcome = self.synchronizer.apply(record)
            except DatabaseError as e:
                if self.fail_fast:
                    raise
                failed += 1
                logger.error(
                    f"❌ Record {record.record_reference} not applied: {e}",
                    extra={"onix_file": filepath.name, "record_reference": record.record_reference},
                )
                continue
            result.count(outcome)
            result.records += 1

        if failed:
            result.error = f"{failed} records failed"
        logger.info(f"✅ {filepath.name}: {result.records} records applied")
        return result
