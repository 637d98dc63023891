"""
Validation context for a single object being validated.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ValidationContext:
    """
    Describes the object instance currently being validated.

    A context is created for each node the graph validator visits and handed
    to every rule evaluated on that node. It is never shared between
    validation calls.

    Attributes:
        instance (Any): The object whose rules are being evaluated
        member_name (Optional[str]): Field the current rule is attached to
        path (Tuple[str, ...]): Property names leading from the root to ``instance``
        items (Dict[str, Any]): Free-form values supplied by the caller
    """

    instance: Any
    member_name: Optional[str] = None
    path: Tuple[str, ...] = ()
    items: Dict[str, Any] = field(default_factory=dict)

    @property
    def object_type(self) -> type:
        return type(self.instance)

    @property
    def depth(self) -> int:
        return len(self.path)

    def for_member(self, name: str) -> "ValidationContext":
        """Return a copy of the context naming the field a rule is checking."""
        return replace(self, member_name=name)

    def child(self, instance: Any, name: str) -> "ValidationContext":
        """Return the context for a nested object found under property ``name``."""
        return ValidationContext(instance=instance, path=self.path + (name,), items=self.items)
