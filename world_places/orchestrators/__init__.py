"""Build orchestration.

Runs the activities end to end:
1. Extract topology → place-agnostic features + border mesh
2. Build registry → aliases → version stamp
3. Annotate rendering features with registry values
"""
