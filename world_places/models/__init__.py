"""Data models and schemas.

Defines the data structures used throughout the build:
- GeometryFeature: Decoded topology feature with resolved identifier
- PlaceMeta: Registry values stamped onto rendering features
- Place / PlaceType: Canonical registry entry and its classification
- VersionMeta: Content hash and revision of a registry
"""

from world_places.models.feature import GeometryFeature, PlaceMeta
from world_places.models.place import Place, PlaceType
from world_places.models.version import VersionMeta

__all__ = [
    "GeometryFeature",
    "Place",
    "PlaceMeta",
    "PlaceType",
    "VersionMeta",
]
