"""
Guard helpers for argument checking.

Each guard checks one argument and returns it unchanged when the check passes,
so guards can be used inline:

    >>> def register(customer, retries):
    ...     customer = throw_if_invalid_object(customer, "customer")
    ...     retries = throw_if_less_than_zero(retries, "retries")

When a check fails the guard raises ArgumentError (ArgumentNullError for the
null checks). The error records the failing argument's name, a fixed message,
and the file, line and function the guard was called from. Pass ``caller`` to
report a different location, for example from a wrapper around a guard.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, NoReturn, Optional, Sized, Type, TypeVar, Union
from urllib.parse import urlsplit
from uuid import UUID

from ..core.config import ValidatorConfig
from ..core.exceptions import ArgumentError, ArgumentNullError
from ..utils.validation.graph import validate_graph
from ..utils.validation.reporter import ValidationReporter
from .caller import CallerInfo, capture_caller

logger = logging.getLogger(__name__)

T = TypeVar("T")
Number = Union[int, float, timedelta]

EMPTY_UUID = UUID(int=0)

_URI_CHARS = re.compile(r"(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})+")
_NETWORK_SCHEMES = ("http", "https", "ftp", "ftps", "ws", "wss")


def _raise(
    arg_name: str,
    message: str,
    caller: Optional[CallerInfo],
    error_type: Type[ArgumentError] = ArgumentError,
    **payload: Any,
) -> NoReturn:
    caller = caller or capture_caller(depth=2)
    logger.debug(
        f"Guard failed for '{arg_name}' in {caller.member_name} "
        f"({caller.source_file_path}:{caller.source_line_number}): {message}"
    )
    raise error_type(
        arg_name,
        message,
        member_name=caller.member_name,
        source_file_path=caller.source_file_path,
        source_line_number=caller.source_line_number,
        **payload,
    )


def _zero(value: Number) -> Number:
    return timedelta(0) if isinstance(value, timedelta) else 0


def throw_if_invalid_object(
    arg_value: T,
    arg_name: str,
    caller: Optional[CallerInfo] = None,
    config: Optional[ValidatorConfig] = None,
) -> T:
    """
    Raise if ``arg_value`` or any object reachable from it fails its rules.

    The whole graph is validated with every rule evaluated. The raised error
    carries the comma-joined failure messages as ``errors`` and the
    comma-joined member names as ``properties``.

    Example:
        >>> @dataclass
        ... class Model:
        ...     a: Annotated[str, RequiredRule()]
        >>> throw_if_invalid_object(Model(a=""), "arg")
        Traceback (most recent call last):
        ...
        graphguard.core.exceptions.ArgumentError: Validation error! (Parameter 'arg')
    """
    if arg_value is None:
        _raise(arg_name, "The argument should not be null!", caller, ArgumentNullError)

    result = validate_graph(arg_value, evaluate_all_rules=True, recursive=True, config=config)
    if not result.is_valid:
        separator = config.list_separator if config else ","
        _raise(
            arg_name,
            "Validation error!",
            caller,
            errors=ValidationReporter.join_errors(result, separator),
            properties=ValidationReporter.join_properties(result, separator),
        )
    return arg_value


def throw_if_null(arg_value: Optional[T], arg_name: str, caller: Optional[CallerInfo] = None) -> T:
    """Raise ArgumentNullError if ``arg_value`` is None."""
    if arg_value is None:
        _raise(arg_name, "The argument should not be null!", caller, ArgumentNullError)
    return arg_value


def throw_if_null_or_empty(
    arg_value: Optional[Sized], arg_name: str, caller: Optional[CallerInfo] = None
) -> Sized:
    """Raise if ``arg_value`` is None or an empty string or collection."""
    if arg_value is None or len(arg_value) == 0:
        _raise(arg_name, "The argument should not be null or empty!", caller)
    return arg_value


def throw_if_not_null_or_empty(
    arg_value: Optional[Sized], arg_name: str, caller: Optional[CallerInfo] = None
) -> Optional[Sized]:
    """Raise unless ``arg_value`` is None or empty."""
    if arg_value is not None and len(arg_value) != 0:
        _raise(arg_name, "The argument must be null or empty!", caller)
    return arg_value


def throw_if_less_than_zero(arg_value: Number, arg_name: str, caller: Optional[CallerInfo] = None) -> Number:
    if arg_value < _zero(arg_value):
        _raise(arg_name, "The argument should not contain a value < 0!", caller)
    return arg_value


def throw_if_less_than_or_equal_zero(
    arg_value: Number, arg_name: str, caller: Optional[CallerInfo] = None
) -> Number:
    if arg_value <= _zero(arg_value):
        _raise(arg_name, "The argument must contain a value > 0!", caller)
    return arg_value


def throw_if_zero(arg_value: Number, arg_name: str, caller: Optional[CallerInfo] = None) -> Number:
    if arg_value == _zero(arg_value):
        _raise(arg_name, "The argument must not be zero!", caller)
    return arg_value


def throw_if_not_zero(arg_value: Number, arg_name: str, caller: Optional[CallerInfo] = None) -> Number:
    if arg_value != _zero(arg_value):
        _raise(arg_name, "The argument must be zero!", caller)
    return arg_value


def throw_if_less_than(
    arg_value: Number, amount: Number, arg_name: str, caller: Optional[CallerInfo] = None
) -> Number:
    if arg_value < amount:
        _raise(arg_name, f"The argument must not be less than {amount}!", caller)
    return arg_value


def throw_if_greater_than(
    arg_value: Number, amount: Number, arg_name: str, caller: Optional[CallerInfo] = None
) -> Number:
    if arg_value > amount:
        _raise(arg_name, f"The argument must not be greater than {amount}!", caller)
    return arg_value


def throw_if_equal(arg_value: T, compare_value: Any, arg_name: str, caller: Optional[CallerInfo] = None) -> T:
    if arg_value == compare_value:
        _raise(arg_name, f"The argument may not equal {compare_value}!", caller)
    return arg_value


def throw_if_not_equal(
    arg_value: T, compare_value: Any, arg_name: str, caller: Optional[CallerInfo] = None
) -> T:
    if arg_value != compare_value:
        _raise(arg_name, f"The argument must equal {compare_value}!", caller)
    return arg_value


def throw_if_true(arg_value: bool, arg_name: str, caller: Optional[CallerInfo] = None) -> bool:
    if arg_value:
        _raise(arg_name, "The argument must not be TRUE!", caller)
    return arg_value


def throw_if_false(arg_value: bool, arg_name: str, caller: Optional[CallerInfo] = None) -> bool:
    if not arg_value:
        _raise(arg_name, "The argument must not be FALSE!", caller)
    return arg_value


def throw_if_empty_uuid(arg_value: UUID, arg_name: str, caller: Optional[CallerInfo] = None) -> UUID:
    if arg_value == EMPTY_UUID:
        _raise(arg_name, "The argument may not contain an empty UUID!", caller)
    return arg_value


def throw_if_not_empty_uuid(arg_value: UUID, arg_name: str, caller: Optional[CallerInfo] = None) -> UUID:
    if arg_value != EMPTY_UUID:
        _raise(arg_name, "The argument should contain an empty UUID!", caller)
    return arg_value


def throw_if_empty_timedelta(
    arg_value: timedelta, arg_name: str, caller: Optional[CallerInfo] = None
) -> timedelta:
    if arg_value == timedelta(0):
        _raise(arg_name, "The argument may not contain an empty time span!", caller)
    return arg_value


def throw_if_not_empty_timedelta(
    arg_value: timedelta, arg_name: str, caller: Optional[CallerInfo] = None
) -> timedelta:
    if arg_value != timedelta(0):
        _raise(arg_name, "The argument should contain an empty time span!", caller)
    return arg_value


def throw_if_invalid_datetime(
    arg_value: Union[datetime, date, str], arg_name: str, caller: Optional[CallerInfo] = None
) -> Union[datetime, date, str]:
    """
    Raise unless ``arg_value`` is a date or datetime, or a string that parses
    as an ISO 8601 date-time.
    """
    if not is_valid_datetime(arg_value):
        _raise(arg_name, "The argument contains an invalid date-time value!", caller)
    return arg_value


def throw_if_malformed_uri(arg_value: str, arg_name: str, caller: Optional[CallerInfo] = None) -> str:
    """Raise unless ``arg_value`` is a well-formed absolute or relative URI."""
    if not is_well_formed_uri(arg_value):
        _raise(arg_name, "The argument is not a well formed URI!", caller)
    return arg_value


def is_valid_datetime(value: Any) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_well_formed_uri(value: Any) -> bool:
    """
    Check that ``value`` only uses characters allowed in a URI, that percent
    escapes are complete, and that network schemes name a host.
    """
    if not isinstance(value, str) or _URI_CHARS.fullmatch(value) is None:
        return False
    try:
        parts = urlsplit(value)
        parts.port  # raises for out-of-range or non-numeric ports
    except ValueError:
        return False
    if parts.scheme.lower() in _NETWORK_SCHEMES and not parts.hostname:
        return False
    return True
