#!/usr/bin/env python3
"""
CSV Grid Package - Edit CSV documents as a live grid

The model converts between CSV text and rows of cells; the view shows the
rows as an editable table bound to one document in a vault.
"""

from .csv_grid_model import (
    CsvGridModel,
    DEFAULT_GRID,
    parse_line,
    parse_document,
    serialize
)

from .csv_grid_view import (
    CsvGridView,
    ViewState
)

__all__ = [
    'CsvGridModel',
    'DEFAULT_GRID',
    'parse_line',
    'parse_document',
    'serialize',
    'CsvGridView',
    'ViewState'
]
