"""Terminal coding assistant driven by a chat model with file, shell and code tools."""

__version__ = "0.1.0"
__all__ = ["__version__"]