"""
Class decorators that validate instances on construction.
"""

import functools
from dataclasses import is_dataclass
from typing import Any, Callable, Optional, Type, TypeVar, Union, overload

from ..core.exceptions import ArgumentError
from ..utils.validation.graph import validate_graph
from ..utils.validation.reporter import ValidationReporter
from .caller import CallerInfo, capture_caller

C = TypeVar("C", bound=type)


@overload
def validate_dataclass(cls: C) -> C: ...


@overload
def validate_dataclass(
    cls: None = None, *, recursive: bool = True, evaluate_all_rules: bool = True
) -> Callable[[C], C]: ...


def validate_dataclass(
    cls: Optional[Type[Any]] = None,
    *,
    recursive: bool = True,
    evaluate_all_rules: bool = True,
) -> Union[Type[Any], Callable[[Type[Any]], Type[Any]]]:
    """
    Decorator that validates dataclass instances after initialization.

    The instance is fully initialized first, including any ``__post_init__``
    the class defines; its graph is then validated and an ArgumentError is
    raised if it fails. The error's caller information points at the line
    constructing the instance.

    The decorator may sit above or below ``@dataclass``. Above, it wraps the
    generated ``__init__``; below, it installs a ``__post_init__`` that the
    generated ``__init__`` will call.

    Example:
        >>> @validate_dataclass
        ... @dataclass
        ... class Example:
        ...     name: Annotated[str, RequiredRule()]
        ...     count: Annotated[int, RangeRule(0, 10)] = 0
        >>> Example(name="")
        Traceback (most recent call last):
        ...
        graphguard.core.exceptions.ArgumentError: Validation error! (Parameter 'Example')
    """

    def check(target: Type[Any], instance: Any, caller: CallerInfo) -> None:
        result = validate_graph(instance, evaluate_all_rules, recursive)
        if not result.is_valid:
            raise ArgumentError(
                target.__name__,
                "Validation error!",
                errors=ValidationReporter.join_errors(result),
                properties=ValidationReporter.join_properties(result),
                member_name=caller.member_name,
                source_file_path=caller.source_file_path,
                source_line_number=caller.source_line_number,
            )

    def decorate(target: Type[Any]) -> Type[Any]:
        if is_dataclass(target):
            original_init = target.__init__

            @functools.wraps(original_init)
            def validated_init(self, *args: Any, **kwargs: Any) -> None:
                original_init(self, *args, **kwargs)
                check(target, self, capture_caller(depth=1))

            target.__init__ = validated_init
            return target

        original_post_init = getattr(target, "__post_init__", None)

        def validated_post_init(self, *args: Any) -> None:
            """Validate the instance graph after initialization."""
            if original_post_init:
                original_post_init(self, *args)
            # __post_init__ <- generated __init__ <- construction site
            check(target, self, capture_caller(depth=2))

        target.__post_init__ = validated_post_init
        return target

    if cls is None:
        return decorate
    return decorate(cls)
