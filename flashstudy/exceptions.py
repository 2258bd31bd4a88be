# flashstudy/exceptions.py
from typing import Dict, List, Optional


class FlashstudyError(Exception):
    """
    Base class for every recoverable failure of the study core.
    `locale_key` names the UI string shown to the user.
    """
    locale_key = "error_generic"

    def params(self) -> Dict[str, str]:
        """Interpolation values for the translated message."""
        return {}


class NoInputFiles(FlashstudyError):
    locale_key = "error_no_input_files"

    def __init__(self, message: str = "No .csv files were selected."):
        super().__init__(message)


class EmptyDeck(FlashstudyError):
    locale_key = "error_empty_deck"

    def __init__(self, document_count: int = 0):
        self.document_count = document_count
        super().__init__(
            f"None of the {document_count} document(s) contained a valid 'term,definition' row."
        )

    def params(self) -> Dict[str, str]:
        return {"count": str(self.document_count)}


class ReadFailure(FlashstudyError):
    """A batch read aborted. `failures` maps each failed path to its reason."""
    locale_key = "error_read_failure"

    def __init__(self, failures: Dict[str, str]):
        self.failures = dict(failures)
        listed = ", ".join(sorted(self.failures))
        super().__init__(f"Could not read {len(self.failures)} file(s): {listed}")

    def params(self) -> Dict[str, str]:
        return {"paths": ", ".join(sorted(self.failures))}


class IncompatibleSnapshot(FlashstudyError):
    """
    The snapshot was produced from a different file set.
    missing: paths the snapshot requires but the deck lacks.
    extra: paths present in the deck that the snapshot does not know.
    """
    locale_key = "error_incompatible_snapshot"

    def __init__(self, missing: List[str], extra: List[str]):
        self.missing = list(missing)
        self.extra = list(extra)
        super().__init__(
            f"Snapshot does not match the loaded files (missing: {self.missing or 'none'}, extra: {self.extra or 'none'})"
        )

    def params(self) -> Dict[str, str]:
        return {
            "missing": ", ".join(self.missing) or "-",
            "extra": ", ".join(self.extra) or "-",
        }


class CorruptSnapshot(FlashstudyError):
    locale_key = "error_corrupt_snapshot"

    def __init__(self, reason: str, cause: Optional[Exception] = None):
        self.reason = reason
        self.cause = cause
        super().__init__(f"Snapshot could not be read: {reason}")

    def params(self) -> Dict[str, str]:
        return {"reason": self.reason}
