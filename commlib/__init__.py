"""Common utilities: strings, hashing, CSV splitting, synchronisation, PE section tables, command logs, filesystem helpers and file logging."""

__version__ = "0.1.0"