"""Mapping layer - copy fields between objects by name or by plan."""

from __future__ import annotations

from plumbline.mapping.builder import MappingBuilder, mapping
from plumbline.mapping.model import ObjectMapper, map_into, map_to
from plumbline.mapping.plan import MappingPlan
from plumbline.mapping.protocol import Mapper

__all__ = [
    "ObjectMapper",
    "Mapper",
    "map_to",
    "map_into",
    "MappingBuilder",
    "mapping",
    "MappingPlan",
]
