"""Command line interface for sharedtable."""
