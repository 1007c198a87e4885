"""External collaborators consumed by the market core."""
