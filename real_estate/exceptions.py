"""Custom exception hierarchy for real-estate lot management."""


class RealEstateError(Exception):
    """Base exception for all real-estate errors."""


class ValidationError(RealEstateError):
    """Raised when input values violate a lot constraint.

    Parameters
    ----------
    violations : list[str] | str
        One message per violated constraint.
    """

    def __init__(self, violations: list[str] | str) -> None:
        if isinstance(violations, str):
            violations = [violations]
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))


class DuplicateLotError(RealEstateError):
    """Raised when a lot with the same block and lot number already exists."""


class LotNotFoundError(RealEstateError):
    """Raised when a referenced lot id does not exist."""


class IllegalTransitionError(RealEstateError):
    """Raised when a status change is not allowed (e.g. leaving SOLD)."""


class PersistenceError(RealEstateError):
    """Raised when reading or writing the data file fails."""


class ConfigurationError(RealEstateError):
    """Raised when configuration is invalid or missing."""
