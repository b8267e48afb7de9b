"""ledbridge: HTTP bridge for a serial-attached LED strip controller."""

__version__ = "0.1.0"
