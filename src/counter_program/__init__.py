"""A u32 counter program driven by compact binary instructions."""

__version__ = "0.1.0"
