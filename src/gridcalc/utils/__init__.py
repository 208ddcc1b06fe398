"""
Utility functions for gridcalc.

- serialization: JSON round-trip of sheet snapshots for persistence
"""

from .serialization import (
    serialize,
    deserialize,
    to_json,
    from_json,
    SERIALIZATION_VERSION
)

__all__ = [
    'serialize',
    'deserialize',
    'to_json',
    'from_json',
    'SERIALIZATION_VERSION'
]
