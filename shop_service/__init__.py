"""Shop service: authoritative product catalog."""
