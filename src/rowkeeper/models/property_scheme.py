"""Declarative per-entity description of logical properties."""
from __future__ import annotations

from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from rowkeeper.errors import PropertyNotFound

Conversion = Callable[[Any], Any]


class PropertyDescriptor(BaseModel):
    """How one logical property maps onto the stored row.

    Method hooks (``getter``, ``setter``, ``extractor``, ``injector``,
    ``output_method``) are names of methods on the row class, resolved per
    instance so subclasses can override them.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    storage_field: Optional[str] = None
    read_only: bool = False
    linked_fields: tuple[str, ...] = ()
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None
    input_conversion: Optional[Conversion] = None
    output_conversion: Optional[Conversion] = None
    getter: Optional[str] = None
    setter: Optional[str] = None
    extractor: Optional[str] = None
    injector: Optional[str] = None
    output_method: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_is_identifier(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"Invalid property name: '{value}'")
        return value

    @property
    def is_virtual(self) -> bool:
        return self.storage_field is None

    def initial_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default

    def touches(self, field: str) -> bool:
        """True if writing this property affects ``field``."""
        return field == self.storage_field or field in self.linked_fields


class PropertyScheme:
    """Ordered, name-unique collection of property descriptors."""

    def __init__(self, *descriptors: PropertyDescriptor, owner: str = "DBRow") -> None:
        self.owner = owner
        self._descriptors: dict[str, PropertyDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._descriptors:
                raise ValueError(
                    f"Duplicate property '{descriptor.name}' in scheme of {owner}"
                )
            self._descriptors[descriptor.name] = descriptor

    def __getitem__(self, name: str) -> PropertyDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise PropertyNotFound(self.owner, name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"PropertyScheme({self.owner}, {list(self._descriptors)})"

    @property
    def names(self) -> list[str]:
        return list(self._descriptors)

    def with_owner(self, owner: str) -> PropertyScheme:
        return PropertyScheme(*self._descriptors.values(), owner=owner)

    def properties_touching(self, field: str) -> list[str]:
        """Names of properties whose storage or linked fields include ``field``."""
        return [d.name for d in self._descriptors.values() if d.touches(field)]
