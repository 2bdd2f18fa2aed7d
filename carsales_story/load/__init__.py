"""
Load Layer - Output Persistence

This layer handles writing rendered scenes to disk.
- Standalone HTML pages for figures
- JSON for derived datasets
- No business logic, just I/O operations
"""
