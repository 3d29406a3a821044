"""World place registry builder.

Derives a canonical, versioned registry of world places (countries and
special territories) plus compact map-rendering geometry from a shared
TopoJSON topology, so downstream apps can look places up by code, draw
borders, and detect dataset changes through a content hash.
"""

__version__ = "0.1.0"
