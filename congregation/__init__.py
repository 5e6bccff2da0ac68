"""Congregation contributions app: members, contributions and the admin dashboard."""

__version__ = "0.1.0"
