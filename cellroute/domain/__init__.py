"""Domain layer: value types and routing services."""
