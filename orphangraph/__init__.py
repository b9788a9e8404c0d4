"""OrphanGraph: static import-graph analysis for finding orphaned source files."""

__version__ = "0.1.0"
