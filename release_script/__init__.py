"""Release orchestration for npm-style packages under git."""

__version__ = "1.0.0"
