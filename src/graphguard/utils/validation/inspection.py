"""
Type Inspection for graphguard

This module turns a class's annotations into an ordered table of property
descriptors: which members exist, which rules are attached to them, and whether
the graph validator should descend into their values.

A member is eligible for descent when it is readable, writable and public, and
its declared type is a reference type with structure of its own. Scalars
(bool, int, float, complex, Enum) and opaque leaf types (str, bytes,
datetime, Decimal, UUID, ...) are never descended into. Collections are
eligible when their element type is.

Descriptor tables only depend on the class and the opaque type set, so they are
computed once per pair and memoized.
"""

import ast
import dataclasses
import inspect
import logging
import textwrap
import types
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    ForwardRef,
    FrozenSet,
    Iterable as TypingIterable,
    List,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ...core.config import DEFAULT_OPAQUE_TYPES, VALUE_TYPES
from ...core.exceptions import ValidationError
from .base import RequiredRule, ValidationRule

logger = logging.getLogger(__name__)

NONE_TYPE = type(None)

# Runtime values that are never descended into regardless of their declaration.
NON_TRAVERSABLE = (
    type,
    Iterator,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
)


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    Metadata for one member of a validated type.

    Attributes:
        name (str): Member name
        declared_type (Any): Declared type with Annotated and Optional stripped
        rules (Tuple[ValidationRule, ...]): Rules attached to the member
        is_readable (bool): Whether the value can be read without arguments
        is_writable (bool): Whether the member can be assigned
        is_eligible (bool): Whether the graph validator descends into the value
        is_collection (Optional[bool]): Whether the value is iterated element by
            element; None when only the runtime value can tell
        element_type (Any): Declared element type of a collection, if known
        is_property (bool): Whether the member is a ``property`` whose getter runs on read
    """

    name: str
    declared_type: Any
    rules: Tuple[ValidationRule, ...] = ()
    is_readable: bool = True
    is_writable: bool = True
    is_eligible: bool = False
    is_collection: Optional[bool] = False
    element_type: Any = None
    is_property: bool = False

    @property
    def is_required(self) -> bool:
        return any(isinstance(rule, RequiredRule) for rule in self.rules)

    @property
    def is_loosely_typed(self) -> bool:
        """Whether the declaration leaves the shape of the value to runtime."""
        if self.is_collection is None:
            return True
        return self.is_collection and self.element_type in (None, Any, object)

    def read(self, instance: Any) -> Any:
        """
        Read this member's current value from ``instance``.

        Errors raised by a property getter propagate. An annotated attribute
        that was never assigned reads as None.
        """
        if self.is_property:
            return getattr(instance, self.name)
        return getattr(instance, self.name, None)

    def holds_collection(self, value: Any) -> bool:
        """Whether ``value`` should be iterated rather than validated as one object."""
        if self.is_collection is not None:
            return self.is_collection
        return is_collection_value(value)

    @staticmethod
    def iter_elements(value: Any) -> TypingIterable[Any]:
        """Iterate a collection value; mappings yield their values."""
        if isinstance(value, Mapping):
            return value.values()
        return iter(value)


def is_leaf_type(tp: type, opaque_types: FrozenSet[type] = DEFAULT_OPAQUE_TYPES) -> bool:
    """Whether instances of ``tp`` are scalars or opaque leaves."""
    if issubclass(tp, VALUE_TYPES):
        return True
    return any(issubclass(tp, opaque) for opaque in opaque_types)


def is_traversable_value(value: Any, opaque_types: FrozenSet[type] = DEFAULT_OPAQUE_TYPES) -> bool:
    """Whether a runtime value is an object the graph validator can descend into."""
    if value is None or isinstance(value, NON_TRAVERSABLE):
        return False
    return not is_leaf_type(type(value), opaque_types)


def is_collection_value(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, bytearray, Iterator))


def unwrap_type(hint: Any) -> Tuple[Any, List[ValidationRule]]:
    """
    Strip Annotated and Optional wrappers from a type hint.

    Returns the remaining type and the rules found in Annotated metadata, in
    the order they were written.
    """
    rules: List[ValidationRule] = []
    while True:
        origin = get_origin(hint)
        if origin is Annotated:
            base, *metadata = get_args(hint)
            rules.extend(item for item in metadata if isinstance(item, ValidationRule))
            hint = base
        elif origin in (Union, types.UnionType):
            members = [arg for arg in get_args(hint) if arg is not NONE_TYPE]
            if not members:
                return NONE_TYPE, rules
            if len(members) != 1:
                return Union[tuple(members)], rules
            hint = members[0]
        else:
            return hint, rules


def classify(
    hint: Any, opaque_types: FrozenSet[type] = DEFAULT_OPAQUE_TYPES
) -> Tuple[bool, Optional[bool], Any]:
    """
    Decide how the graph validator treats values declared as ``hint``.

    Returns:
        Tuple of (eligible, is_collection, element_type). ``is_collection`` is
        None when the declaration is too loose (Any, unions, bare iterables)
        and the runtime value has to decide.
    """
    hint, _ = unwrap_type(hint)

    if hint is Any or hint is object or isinstance(hint, (str, ForwardRef)):
        return True, None, None

    supertype = getattr(hint, "__supertype__", None)
    if supertype is not None:
        return classify(supertype, opaque_types)

    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        eligible = any(classify(arg, opaque_types)[0] for arg in get_args(hint))
        return eligible, None, None

    cls = origin if origin is not None else hint
    args = get_args(hint) if origin is not None else ()
    if not isinstance(cls, type):
        # Literal, TypeVar and other special forms
        return False, False, None

    if is_leaf_type(cls, opaque_types) or issubclass(cls, (type, Iterator)):
        return False, False, None

    if issubclass(cls, Mapping):
        element = args[1] if len(args) == 2 else None
    elif issubclass(cls, Iterable):
        element = _sequence_element(cls, args)
    else:
        return True, False, None

    if element is not None and not classify(element, opaque_types)[0]:
        return False, True, element
    return True, True, element


def _sequence_element(cls: type, args: Tuple[Any, ...]) -> Any:
    if not args:
        return None
    if cls is tuple or issubclass(cls, tuple):
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if len(set(args)) == 1:
            return args[0]
        # Heterogeneous tuples are judged element by element at runtime.
        return None
    return args[0]


@lru_cache(maxsize=None)
def describe_type(
    cls: type, opaque_types: FrozenSet[type] = DEFAULT_OPAQUE_TYPES
) -> Tuple[PropertyDescriptor, ...]:
    """
    Build the ordered descriptor table for ``cls``.

    Annotated attributes and public properties are listed in the order they
    appear in the class body, base classes before subclasses. When a class
    has no retrievable source, its annotations come before its properties.
    Private names, ClassVar and InitVar annotations are skipped. Properties
    whose getter needs arguments are not readable and are left out. Fields
    of a frozen dataclass and properties without a setter are not writable,
    and the graph validator does not descend into them.

    Raises:
        ValidationError: If the class annotations cannot be resolved
    """
    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        raise ValidationError(f"Unable to resolve type hints for {cls.__name__}: {e}") from e

    frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen
    descriptors: List[PropertyDescriptor] = []
    for name, hint in hints.items():
        if name.startswith("_") or isinstance(hint, dataclasses.InitVar):
            continue
        if isinstance(inspect.getattr_static(cls, name, None), property):
            continue
        base, rules = unwrap_type(hint)
        if base is ClassVar or get_origin(base) is ClassVar:
            continue
        eligible, is_collection, element = classify(base, opaque_types)
        descriptors.append(
            PropertyDescriptor(
                name=name,
                declared_type=base,
                rules=tuple(rules),
                is_writable=not frozen,
                is_eligible=eligible and not frozen,
                is_collection=is_collection,
                element_type=element,
            )
        )

    for name, prop in _public_properties(cls):
        if not _takes_no_arguments(prop.fget):
            logger.debug(f"Skipping {cls.__name__}.{name}: getter requires arguments")
            continue
        try:
            hint = get_type_hints(prop.fget, include_extras=True).get("return", Any)
        except (NameError, TypeError) as e:
            raise ValidationError(
                f"Unable to resolve type hints for {cls.__name__}.{name}: {e}"
            ) from e
        base, rules = unwrap_type(hint)
        writable = prop.fset is not None
        eligible, is_collection, element = classify(base, opaque_types)
        descriptors.append(
            PropertyDescriptor(
                name=name,
                declared_type=base,
                rules=tuple(rules),
                is_writable=writable,
                is_eligible=eligible and writable,
                is_collection=is_collection,
                element_type=element,
                is_property=True,
            )
        )

    order = _member_order(cls)
    unknown = (len(cls.__mro__), 0)
    descriptors.sort(key=lambda d: order.get(d.name, unknown))

    logger.debug(
        f"Described {cls.__name__}: {len(descriptors)} members, "
        f"{sum(d.is_eligible for d in descriptors)} eligible for descent"
    )
    return tuple(descriptors)


def eligible_properties(
    cls: type, opaque_types: FrozenSet[type] = DEFAULT_OPAQUE_TYPES
) -> Tuple[PropertyDescriptor, ...]:
    """Descriptors of ``cls`` the graph validator descends into, in order."""
    return tuple(d for d in describe_type(cls, opaque_types) if d.is_eligible)


def read_member(instance: Any, name: str) -> Any:
    """
    Read ``name`` from ``instance`` for rule evaluation.

    Property getters run strictly so their errors reach the caller; plain
    attributes that were never assigned read as None.
    """
    if isinstance(inspect.getattr_static(type(instance), name, None), property):
        return getattr(instance, name)
    return getattr(instance, name, None)


def _public_properties(cls: type) -> List[Tuple[str, property]]:
    found = {}
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_") and attr.fget is not None:
                found[name] = attr
    return list(found.items())


def _member_order(cls: type) -> Dict[str, Tuple[int, int]]:
    """Map member names to (class depth, body position), base classes first."""
    order: Dict[str, Tuple[int, int]] = {}
    for depth, klass in enumerate(reversed(cls.__mro__)):
        for position, name in enumerate(_class_body_names(klass)):
            order.setdefault(name, (depth, position))
    return order


@lru_cache(maxsize=None)
def _class_body_names(klass: type) -> Tuple[str, ...]:
    """Annotated and function names in the order the class body declares them."""
    names: List[str] = []
    try:
        tree = ast.parse(textwrap.dedent(inspect.getsource(klass)))
    except (OSError, TypeError, SyntaxError):
        tree = None

    if tree is not None and tree.body and isinstance(tree.body[0], ast.ClassDef):
        for node in tree.body[0].body:
            if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                names.append(node.target.id)
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                names.append(node.name)

    # Members the source did not show, such as classes built at runtime
    names.extend(inspect.get_annotations(klass))
    names.extend(name for name, attr in vars(klass).items() if isinstance(attr, property))
    return tuple(dict.fromkeys(names))


def _takes_no_arguments(getter: Any) -> bool:
    try:
        signature = inspect.signature(getter)
    except (TypeError, ValueError):
        return False
    required = [
        p
        for p in signature.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return len(required) <= 1
