"""repodump - clone a repository and flatten its source files into one text blob."""

__version__ = "0.1.0"
