"""
Extract Layer - Pure I/O for the Sales Table

This layer handles reading the source table with no business logic.
- No imports from transform or load layers
- Local files or HTTP(S) sources
- Column checks and row validation only
"""
