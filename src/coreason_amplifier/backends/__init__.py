"""Review backend implementations."""
