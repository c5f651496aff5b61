"""
chartdeck - data-shaping and chart-configuration engine.

Loads tabular data from delimited files, MongoDB collections or a bundled
sample, infers field types, flattens nested records and turns field
selections into declarative chart specifications.
"""

__version__ = "0.1.0"
