"""Scope Pylance analysis per workspace folder based on its Python file count."""

__version__ = "0.1.0"
