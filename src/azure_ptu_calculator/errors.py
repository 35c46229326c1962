"""Error types for the Azure PTU calculator.

Bad end-user numbers never raise; these errors cover configuration problems
detected when the pricing tables load, caller errors such as an unknown
deployment type, and history file failures.
"""

from typing import List, Optional


class PtuCalculatorError(Exception):
    """Base class for all calculator-related errors."""

    pass


class ConfigurationError(PtuCalculatorError):
    """Base class for configuration-related errors.

    This is raised for errors related to loading, parsing, or validating the
    pricing and PTU rule tables.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the configuration file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when a required table file is not found.

    Examples:
        >>> try:
        ...     PricingTables(TablesConfig(pricing_path="/missing.yaml"))
        ... except ConfigFileNotFoundError as e:
        ...     print(f"Config file not found: {e.path}")
    """

    pass


class InvalidConfigFormatError(ConfigurationError):
    """Raised when a table file has an invalid format."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        expected_type: str = "dict",
    ) -> None:
        """Initialize invalid format error.

        Args:
            message: Error message
            path: Optional path to the configuration file
            expected_type: Expected type of the offending node
        """
        super().__init__(message, path)
        self.expected_type = expected_type


class FallbackModelError(ConfigurationError):
    """Raised when the fallback model cannot back every lookup.

    The fallback model must have pricing and a PTU rule for each deployment
    type, otherwise lookups for unknown models would not be total.
    """

    def __init__(self, message: str, model: str, path: Optional[str] = None) -> None:
        """Initialize fallback model error.

        Args:
            message: Error message
            model: The configured fallback model
            path: Optional path to the table that lacks it
        """
        super().__init__(message, path)
        self.model = model


class InvalidDeploymentTypeError(PtuCalculatorError, ValueError):
    """Raised when a deployment type string is not recognized.

    Examples:
        >>> try:
        ...     DeploymentType.parse("edge")
        ... except InvalidDeploymentTypeError as e:
        ...     print(f"Use one of: {e.valid_values}")
    """

    def __init__(self, message: str, value: str, valid_values: List[str]) -> None:
        """Initialize invalid deployment type error.

        Args:
            message: Error message
            value: The rejected value
            valid_values: Accepted deployment type values
        """
        super().__init__(message)
        self.message = message
        self.value = value
        self.valid_values = valid_values

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class HistoryError(PtuCalculatorError):
    """Raised when the history file cannot be read or written."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize history error.

        Args:
            message: Error message
            path: Path to the history file
        """
        super().__init__(message)
        self.message = message
        self.path = path
