"""HTTP API for the StableSwap calculator."""
