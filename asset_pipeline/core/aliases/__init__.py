"""
Column alias resolution.
"""

from .resolver import FieldAliasResolver

__all__ = ["FieldAliasResolver"]
