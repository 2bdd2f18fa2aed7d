"""
Render Layer - Chart Drawing

This layer maps derived datasets onto chart geometry.
- Consumes derived datasets only, never raw records
- No aggregation logic
- Returns plotly figures; writing them out belongs to the load layer
"""
