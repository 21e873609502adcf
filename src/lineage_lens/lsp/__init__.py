"""Language server exposing the lineage index to editors."""
