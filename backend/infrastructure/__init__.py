"""
Infrastructure layer: persistence adapters, security and logging helpers.

Implements the ports declared under `application.ports`; never imported by
`domain`.
"""

__all__ = [
    "ids",
    "persistence",
    "security",
    "utils",
]
