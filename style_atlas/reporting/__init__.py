"""
CLI reporting.

Modules
-------
formatters : ASCII tables for rank groups, locations and paths.
export     : JSON file adapters for results and point documents.
"""
