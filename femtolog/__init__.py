"""Logging support utilities: string helpers, stack traces and crash handlers."""

__version__ = "0.1.0"
__all__ = ["strings", "stack_trace", "handlers"]