"""File format layer.

This package parses bytes into tables and renders tables into bytes.
Backends are looked up through the format registry.
"""
