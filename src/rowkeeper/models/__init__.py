from __future__ import annotations

from rowkeeper.models.property_scheme import PropertyDescriptor, PropertyScheme

__all__ = ["PropertyDescriptor", "PropertyScheme"]
