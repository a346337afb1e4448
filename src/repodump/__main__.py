"""Entry point for running repodump as a module.

Usage:
    python -m repodump serve
    python -m repodump serve --port 8080
    python -m repodump ingest https://github.com/octocat/Hello-World.git
"""

from repodump.cli import app

if __name__ == "__main__":
    app()
