"""Per-repository audit workflow graph."""
