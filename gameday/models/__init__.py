"""Domain values and API schemas."""
