"""openingscope: clustering and viewport engine for chess opening graphs."""

__version__ = "0.4.0"
