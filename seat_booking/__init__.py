"""Seat booking service: register, log in and reserve seats from a fixed pool."""

__version__ = "0.1.0"
