class CreditMindError(Exception):
    """Base class for errors surfaced to the user for a single action."""


class ValidationError(CreditMindError):
    """A required field is missing or invalid. The mutation is not applied."""


class NotFoundError(CreditMindError):
    pass


class ImportAdapterError(CreditMindError):
    """Statement extraction failed (network, service or unparseable output)."""


class ImportInProgressError(ImportAdapterError):
    pass


class BackupFormatError(CreditMindError):
    pass
