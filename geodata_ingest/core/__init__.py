"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants, region defaults, policy names
- exceptions: Custom exception hierarchy
"""
