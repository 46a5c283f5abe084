"""Kernel types."""
from flagstore.kernel.types.option import NOTHING, Nothing, Option, Some, option_of

__all__ = ["NOTHING", "Nothing", "Option", "Some", "option_of"]
