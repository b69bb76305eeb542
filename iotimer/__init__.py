"""A cycling timer, a line-based JSON protocol to control it, and I/O-free
client and server coroutines with helpers to drive them over streams."""

__version__ = "1.0.0"