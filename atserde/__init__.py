"""Write dataclasses as AT command strings and read AT responses into typed values."""

__version__ = "0.1.0"