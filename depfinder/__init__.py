"""Find which JavaScript/TypeScript files import a given file."""

from .circular import is_circular_dependency
from .config import DependentsOptions
from .dependencies import find_dependencies
from .scanner import find_dependents

__all__ = [
    "DependentsOptions",
    "find_dependencies",
    "find_dependents",
    "is_circular_dependency",
]
