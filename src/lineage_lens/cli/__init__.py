"""Command line interface for lineage-lens."""
