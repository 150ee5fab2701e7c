"""Typed-structure IO facade package."""
