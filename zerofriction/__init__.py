"""zerofriction - detect and eliminate dependency friction in JavaScript projects."""

__version__ = "0.1.0"
