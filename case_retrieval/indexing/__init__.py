"""
Vector indexes and index generations.
"""

from .base import Index
from .brute_force import BruteForceL2Index, BruteForceL2IndexPure
from .generation import INDEX_KINDS, IndexGeneration, build, build_generation, search

__all__ = [
    "Index",
    "BruteForceL2Index",
    "BruteForceL2IndexPure",
    "INDEX_KINDS",
    "IndexGeneration",
    "build",
    "build_generation",
    "search",
]
