"""Errors and warnings raised by the wordlist cleaning engine."""


class WordcleanError(Exception):
    """Base error for this package."""


class ConfigurationError(WordcleanError, ValueError):
    """Raised when the dataset or the wordlists cannot be used as given.

    Always raised before any column is modified.
    """


class WordlistWarning(UserWarning):
    """Consolidated diagnostic for one cleaning run.

    The structured report is available as ``report``.
    """

    def __init__(self, message: str, report=None):
        super().__init__(message)
        self.report = report
