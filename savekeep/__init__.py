"""SaveKeep: accounts, tokens and save slots for the game backend."""

__version__ = "0.1.0"
