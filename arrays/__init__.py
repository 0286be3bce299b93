"""
arrays/
-------
Input data layer.  Public API:

    from arrays import Distribution, generate_array, is_sorted
"""

from arrays.generators import (
    Distribution,
    parse_distribution,
    generate_array,
    is_sorted,
)

__all__ = [
    "Distribution",
    "parse_distribution",
    "generate_array",
    "is_sorted",
]
