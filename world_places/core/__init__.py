"""Core utilities and shared infrastructure.

- catalog: Curated place catalog (YAML) loading and validation
- config: Build configuration loading and validation
- constants: Draw-order bands, hash format, asset filenames
- exceptions: Build exception hierarchy
"""
