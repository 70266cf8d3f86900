"""
devrestart - Command Line Interface

Inspect restart decisions and code-region classification.
"""
from cli.main import app, main

__all__ = ["app", "main"]
