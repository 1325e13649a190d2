"""
Output side of a migration: the file writer and model code generation.
"""

from .typescript import TypescriptVisitor
from .writer import FileWriter

__all__ = ["FileWriter", "TypescriptVisitor"]
