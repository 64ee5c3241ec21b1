"""Errors raised by the tax engine and rule table stores."""


class TaxEngineError(Exception):
    """Base class for recoverable tax engine failures."""


class TaxValidationError(TaxEngineError):
    """The calculation request is malformed (negative income, bad year)."""


class RuleTableNotFoundError(TaxEngineError):
    """No rule table exists for the requested financial year."""

    def __init__(self, financial_year: str) -> None:
        super().__init__(f"No tax rules for financial year: {financial_year}")
        self.financial_year = financial_year


class StoreUnavailableError(TaxEngineError):
    """The rule table store could not be reached."""
