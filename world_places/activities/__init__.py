"""Build activities.

Each activity performs a single stage of the place build:
- extract_topology: Decode topology features and the border mesh
- build_registry: Derive, classify and order the place list
- synthesize_aliases: Lookup aliases per place
- compute_version: Content hash and revision of the registry
"""
