"""
Transformation Layer - Pure, Deterministic Functions

This layer contains all aggregation logic behind the three scenes.
- Pure functions (records in → derived dataset out)
- No I/O operations, no drawing
- Unit testable
- Deterministic results
"""
