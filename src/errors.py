"""Exceptions raised by the data layer. None of them reach the UI."""


class ExpenseViewerError(Exception):
    """Base class for expense viewer errors."""


class DataSourceError(ExpenseViewerError):
    """A remote or local data source could not be read."""


class MalformedPayloadError(DataSourceError):
    """A payload was read but has no usable `results` list."""
