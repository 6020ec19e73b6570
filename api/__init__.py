"""HTTP layer over the farm store."""
