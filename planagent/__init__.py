"""Planning agent driven by a tool-calling chat model, with an HTTP front end."""

__version__ = "0.1.0"
__all__ = ["__version__"]