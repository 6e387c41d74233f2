"""Crude CSV - edit CSV documents in a vault as a live grid."""

__version__ = '0.1.0'
