"""Simulated coffee vending machine components running on a virtual clock."""

__version__ = "0.1.0"