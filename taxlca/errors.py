class TaxLcaError(Exception):
    """Base class for errors raised by taxlca."""


class ParseError(TaxLcaError):
    """A taxonomy dump could not be turned into a usable tree."""

    def __init__(self, message, path=None, lineno=None):
        self.path = path
        self.lineno = lineno
        if path is not None and lineno is not None:
            message = f"{path}:{lineno}: {message}"
        elif path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class NoValidTaxaError(TaxLcaError):
    """None of the taxon identifiers given to the LCA resolver are known."""


class RecordStoreError(TaxLcaError):
    """The record store is malformed or a record could not be read."""


class OutputError(TaxLcaError):
    """A worker could not create or write its output destination."""
