"""In-memory table layer.

This package holds typed columns and the table that aligns them.
It has no knowledge of files or formats.
"""
