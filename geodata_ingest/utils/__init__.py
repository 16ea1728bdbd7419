"""Shared helper utilities.

- file_io: File reading and writing helpers
- helpers: Small shared helper functions
"""
