"""
Custom exceptions for the graphguard validation system.

This module defines the hierarchy of exceptions raised by the validator and the
guard helpers. Rule violations found while walking an object graph are never
raised directly; they are collected as failure records. The exceptions below
cover the conditions that sit outside that model: misuse of the API, broken
type metadata, bad configuration and the guard layer's argument errors.
"""

from typing import Any, Dict, Optional


class ValidationError(Exception):
    """
    Raised when the validator cannot evaluate a type.

    This exception is raised when the metadata needed to validate an object
    cannot be produced, for example because type hints reference names that
    cannot be resolved at runtime.

    Examples:
        * Unresolvable forward references in annotations
        * Rules attached to something that is not a field
    """

    def __str__(self) -> str:
        """Format validation error message."""
        return f"Validation Error: {super().__str__()}"


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid.

    This exception is raised when validator configuration issues are detected,
    such as values of the wrong type or opaque type paths that cannot be
    imported.

    Examples:
        * Unknown configuration keys
        * Invalid configuration values
        * Opaque type paths that do not resolve to a class
    """

    def __str__(self) -> str:
        """Format configuration error message."""
        return f"Configuration Error: {super().__str__()}"


class ArgumentError(ValueError):
    """
    Raised by the guard helpers when an argument fails a check.

    The error carries an explicit payload instead of relying on a generic side
    table: the name of the failing argument, the message, the joined rule
    violation messages and member names (for object validation), and the caller
    location captured when the guard was invoked.

    Examples:
        * A negative count passed where a positive one is required
        * An object argument whose graph fails validation
        * A malformed URI string

    Attributes:
        arg_name: Name of the argument that failed the check
        message: Human-readable description of the failure
        errors: Comma-joined rule violation messages, if any
        properties: Comma-joined member names of the violated rules, if any
        member_name: Name of the function that invoked the guard
        source_file_path: File containing the guard call
        source_line_number: Line of the guard call
    """

    def __init__(
        self,
        arg_name: str,
        message: str,
        errors: Optional[str] = None,
        properties: Optional[str] = None,
        member_name: str = "",
        source_file_path: str = "",
        source_line_number: int = 0,
    ):
        super().__init__(message)
        self.arg_name = arg_name
        self.message = message
        self.errors = errors
        self.properties = properties
        self.member_name = member_name
        self.source_file_path = source_file_path
        self.source_line_number = source_line_number

    @property
    def data(self) -> Dict[str, Any]:
        """Return the payload as a mapping, omitting absent violation details."""
        data: Dict[str, Any] = {}
        if self.errors is not None:
            data["errors"] = self.errors
        if self.properties is not None:
            data["properties"] = self.properties
        data["memberName"] = self.member_name
        data["sourceLineNumber"] = self.source_line_number
        data["sourceFilePath"] = self.source_file_path
        return data

    def __str__(self) -> str:
        """Format argument error message."""
        return f"{self.message} (Parameter '{self.arg_name}')"


class ArgumentNullError(ArgumentError):
    """
    Raised when a required argument is None.

    This is the usage error reported when validation is requested for a missing
    root object, and the error raised by the null guards.

    Examples:
        * validate_graph(None)
        * throw_if_null(None, "customer")
    """
