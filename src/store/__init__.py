"""Table storage layer.

This package decodes, holds, queries and persists one flat table file.
It powers the FlatTable SDK and the command-line interface.
"""
