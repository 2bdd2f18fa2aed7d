"""
Asian vs Western car sales scrollytelling pipeline.

Three chart scenes built from one table of vehicle sales records, with
next / previous / select navigation between them.
"""

__version__ = "1.0.0"
