"""
ONIX Books Sync - Custom Exceptions
Specific exception classes for better error handling and debugging.
"""


class OnixSyncError(Exception):
    """Base exception for all ONIX Books Sync errors."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}

    def __str__(self):
        base = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} [{context_str}]"
        return base


class ParserError(OnixSyncError):
    """File could not be read or is not well-formed XML."""

    def __init__(self, message: str, filename: str = None):
        context = {"file": filename} if filename else {}
        super().__init__(message, context)
        self.filename = filename


class DatabaseError(OnixSyncError):
    """A single statement against the books table failed."""

    def __init__(self, message: str, table: str = None, record_reference: str = None):
        context = {}
        if table:
            context["table"] = table
        if record_reference:
            context["record"] = record_reference
        super().__init__(message, context)
        self.table = table
        self.record_reference = record_reference


class StoreConnectionError(OnixSyncError):
    """Store connection could not be opened or was lost. Always fatal."""

    def __init__(self, message: str, backend: str = None):
        context = {"backend": backend} if backend else {}
        super().__init__(message, context)
        self.backend = backend


class ConfigurationError(OnixSyncError):
    """Errors in configuration (unknown backend, missing input folder, etc)."""

    def __init__(self, message: str, setting: str = None):
        context = {"setting": setting} if setting else {}
        super().__init__(message, context)
        self.setting = setting
