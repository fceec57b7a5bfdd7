"""Staking calculators built on :mod:`edgestake.core`."""
