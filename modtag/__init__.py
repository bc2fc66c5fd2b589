"""Release tagging for versioned modules in a monorepo."""

__version__ = "0.1.0"
