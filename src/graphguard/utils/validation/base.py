"""
Base Validation Components for graphguard

This module provides the foundational validation components used throughout the validation system.
It includes the ValidationResult class returned by a validation run and a hierarchy of
ValidationRule classes that are attached declaratively to fields.

Rules are attached with ``typing.Annotated``:

    >>> @dataclass
    ... class Customer:
    ...     name: Annotated[str, RequiredRule(), LengthRule(max_length=50)]
    ...     age: Annotated[int, RangeRule(0, 150)] = 0

The module supports:
- Required field validation
- Type checking
- Numeric range validation
- String and collection length validation
- Regular expression pattern matching
- E-mail address and URL checks
- Comparison with a sibling field
- Custom validation functions
- JSON schema validation of mapping fields
- Object-level rules attached to a class

Every rule except RequiredRule treats None as valid, so optional fields only need
RequiredRule when they must be present.
"""

import numbers
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, best_match

from ...core.exceptions import ValidationError
from ...core.models import FailureSet, ValidationContext


@dataclass
class ValidationResult:
    """
    Container for validation results providing comprehensive validation outcome details.

    Attributes:
        is_valid (bool): Whether the validation passed successfully
        failures (FailureSet): Rule violations in discovery order
        warnings (List[str]): Non-fatal notices, such as cycles that were not followed
        context (Optional[Dict[str, Any]]): Additional context about the validation
    """

    is_valid: bool
    failures: FailureSet = field(default_factory=FailureSet)
    warnings: List[str] = field(default_factory=list)
    context: Optional[Dict[str, Any]] = None

    @property
    def errors(self) -> List[str]:
        """Failure messages, path prefixes included."""
        return self.failures.messages

    def __bool__(self) -> bool:
        return self.is_valid


class ValidationRule:
    """
    Base class for all validation rules in the system.

    Subclasses override validate() to check a single value. Rules that need the
    surrounding object override is_valid() instead, which receives the
    validation context.

    Attributes:
        error_message (Optional[str]): Message template used when validation fails.
            It may reference ``{name}`` and the rule's own parameters.
    """

    default_message = "The field {name} is invalid."

    def __init__(self, error_message: Optional[str] = None):
        """
        Initialize a validation rule.

        Args:
            error_message: Message template to use instead of the rule's default
        """
        self.error_message = error_message

    def validate(self, value: Any) -> bool:
        """
        Validate a value against the rule.

        Args:
            value: Value to validate

        Returns:
            bool: True if validation passes, False otherwise

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Validation rules must implement validate()")

    def is_valid(self, value: Any, context: ValidationContext) -> bool:
        """Validate a field value in the context of its owning object."""
        if value is None:
            return True
        return self.validate(value)

    def message_args(self, value: Any) -> Dict[str, Any]:
        """Extra values available to the message template."""
        return {}

    def format_message(self, name: str, value: Any = None) -> str:
        """Render the failure message for the field ``name``."""
        template = self.error_message or self.default_message
        return template.format(name=name, **self.message_args(value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RequiredRule(ValidationRule):
    """
    Rule for validating required fields.

    This rule ensures that a value is not None and, if it's a string,
    that it's not empty after stripping whitespace.

    Attributes:
        allow_empty_strings (bool): Accept empty or whitespace-only strings
    """

    default_message = "The {name} field is required."

    def __init__(self, error_message: Optional[str] = None, allow_empty_strings: bool = False):
        super().__init__(error_message)
        self.allow_empty_strings = allow_empty_strings

    def validate(self, value: Any) -> bool:
        """
        Validate that a value is present and non-empty.

        Args:
            value: Value to validate

        Returns:
            bool: True if the value is present and non-empty, False otherwise
        """
        if isinstance(value, str) and not self.allow_empty_strings:
            return bool(value.strip())
        return value is not None

    def is_valid(self, value: Any, context: ValidationContext) -> bool:
        return self.validate(value)


class TypeRule(ValidationRule):
    """
    Rule for type checking values.

    Attributes:
        expected_type: Single type or tuple of types to check against
    """

    default_message = "The field {name} must be of type {type_name}."

    def __init__(
        self,
        expected_type: Union[Type, Tuple[Type, ...]],
        error_message: Optional[str] = None,
    ):
        super().__init__(error_message)
        self.expected_type = expected_type

    def validate(self, value: Any) -> bool:
        return isinstance(value, self.expected_type)

    def message_args(self, value: Any) -> Dict[str, Any]:
        if isinstance(self.expected_type, tuple):
            type_name = " or ".join(t.__name__ for t in self.expected_type)
        else:
            type_name = self.expected_type.__name__
        return {"type_name": type_name}


class RangeRule(ValidationRule):
    """
    Rule for validating numeric ranges.

    Either min_value or max_value can be None to create an open-ended range.
    Booleans are not considered numbers here.

    Attributes:
        min_value (Optional[float]): Minimum allowed value
        max_value (Optional[float]): Maximum allowed value
    """

    default_message = "The field {name} must be between {min_value} and {max_value}."

    def __init__(
        self,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        error_message: Optional[str] = None,
    ):
        if min_value is not None and max_value is not None and min_value > max_value:
            raise ValueError("min_value cannot be greater than max_value")
        super().__init__(error_message)
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
            return False
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True

    def message_args(self, value: Any) -> Dict[str, Any]:
        return {
            "min_value": "-inf" if self.min_value is None else self.min_value,
            "max_value": "inf" if self.max_value is None else self.max_value,
        }

    def __repr__(self) -> str:
        return f"RangeRule({self.min_value!r}, {self.max_value!r})"


class LengthRule(ValidationRule):
    """
    Rule for the length of strings and collections.

    Attributes:
        min_length (int): Minimum allowed length
        max_length (Optional[int]): Maximum allowed length, or None for no maximum
    """

    def __init__(
        self,
        min_length: int = 0,
        max_length: Optional[int] = None,
        error_message: Optional[str] = None,
    ):
        if min_length < 0:
            raise ValueError("min_length must be non-negative")
        if max_length is not None and max_length < min_length:
            raise ValueError("max_length cannot be less than min_length")
        super().__init__(error_message)
        self.min_length = min_length
        self.max_length = max_length

    @property
    def default_message(self) -> str:  # type: ignore[override]
        if self.max_length is None:
            return (
                "The field {name} must be a string or collection with a minimum "
                "length of {min_length}."
            )
        return (
            "The field {name} must be a string or collection with a minimum length "
            "of {min_length} and a maximum length of {max_length}."
        )

    def validate(self, value: Any) -> bool:
        length = len(value)
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length

    def message_args(self, value: Any) -> Dict[str, Any]:
        return {"min_length": self.min_length, "max_length": self.max_length}


class RegexRule(ValidationRule):
    """
    Rule for regex pattern matching.

    The whole string value must match the pattern. Empty strings are accepted;
    combine with RequiredRule to reject them.

    Attributes:
        pattern: Compiled regular expression pattern
    """

    default_message = "The field {name} must match the regular expression '{pattern}'."

    def __init__(self, pattern: str, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.pattern = re.compile(pattern)

    def validate(self, value: Any) -> bool:
        text = str(value)
        if not text:
            return True
        return self.pattern.fullmatch(text) is not None

    def message_args(self, value: Any) -> Dict[str, Any]:
        return {"pattern": self.pattern.pattern}

    def __repr__(self) -> str:
        return f"RegexRule({self.pattern.pattern!r})"


class EmailRule(ValidationRule):
    """
    Rule for e-mail addresses.

    Only the shape is checked: exactly one '@' that is neither the first nor the
    last character, and no line breaks.
    """

    default_message = "The {name} field is not a valid e-mail address."

    def validate(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        if "\r" in value or "\n" in value:
            return False
        at = value.find("@")
        return 0 < at < len(value) - 1 and value.find("@", at + 1) == -1


class UrlRule(ValidationRule):
    """Rule for fully-qualified http, https and ftp URLs."""

    default_message = "The {name} field is not a valid fully-qualified http, https, or ftp URL."

    SCHEMES = ("http://", "https://", "ftp://")

    def validate(self, value: Any) -> bool:
        return isinstance(value, str) and value.lower().startswith(self.SCHEMES)


class CompareRule(ValidationRule):
    """
    Rule requiring a field to equal another field of the same object.

    Attributes:
        other (str): Name of the field to compare against
    """

    default_message = "'{name}' and '{other}' do not match."

    def __init__(self, other: str, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.other = other

    def is_valid(self, value: Any, context: ValidationContext) -> bool:
        if not hasattr(context.instance, self.other):
            raise ValidationError(
                f"Could not find a property named {self.other} on {context.object_type.__name__}"
            )
        return value == getattr(context.instance, self.other)

    def message_args(self, value: Any) -> Dict[str, Any]:
        return {"other": self.other}

    def __repr__(self) -> str:
        return f"CompareRule({self.other!r})"


class CustomRule(ValidationRule):
    """
    Rule for custom validation functions.

    This rule allows for arbitrary validation logic to be implemented
    through a callable function.

    Attributes:
        validator_func: Custom validation function that returns a boolean
    """

    def __init__(self, validator_func: Callable[[Any], bool], error_message: Optional[str] = None):
        super().__init__(error_message)
        self.validator_func = validator_func

    def validate(self, value: Any) -> bool:
        return bool(self.validator_func(value))


class JsonSchemaRule(ValidationRule):
    """
    Rule validating a mapping or list field against a JSON schema.

    Attributes:
        schema (Dict[str, Any]): JSON schema definition
    """

    default_message = "The field {name} does not match its schema: {detail}"

    def __init__(self, schema: Dict[str, Any], error_message: Optional[str] = None):
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValidationError(f"Invalid JSON schema: {e.message}")
        super().__init__(error_message)
        self.schema = schema
        self._validator = Draft202012Validator(schema)

    def validate(self, value: Any) -> bool:
        return self._validator.is_valid(value)

    def message_args(self, value: Any) -> Dict[str, Any]:
        error = best_match(self._validator.iter_errors(value))
        return {"detail": error.message if error is not None else ""}


class ObjectRule(ValidationRule):
    """
    Rule evaluated against a whole object rather than one of its fields.

    Object rules run after every field rule of the object has passed.

    Attributes:
        validator_func: Function receiving the object and returning a boolean
        member_names (Tuple[str, ...]): Members reported with the failure
    """

    default_message = "The {name} object is invalid."

    def __init__(
        self,
        validator_func: Callable[[Any], bool],
        error_message: Optional[str] = None,
        member_names: Sequence[str] = (),
    ):
        super().__init__(error_message)
        self.validator_func = validator_func
        self.member_names = tuple(member_names)

    def validate(self, value: Any) -> bool:
        return bool(self.validator_func(value))


OBJECT_RULES_ATTR = "__object_rules__"


def object_rule(
    validator_func: Callable[[Any], bool],
    error_message: Optional[str] = None,
    member_names: Sequence[str] = (),
) -> Callable[[type], type]:
    """
    Class decorator attaching an object-level rule.

    Example:
        >>> @object_rule(lambda r: r.start <= r.end, "start must not be after end",
        ...              member_names=("start", "end"))
        ... @dataclass
        ... class Period:
        ...     start: int
        ...     end: int
    """
    rule = ObjectRule(validator_func, error_message, member_names)

    def decorator(cls: type) -> type:
        own = cls.__dict__.get(OBJECT_RULES_ATTR, ())
        # Decorators apply bottom-up; keep the order they are written in.
        setattr(cls, OBJECT_RULES_ATTR, (rule,) + tuple(own))
        return cls

    return decorator
