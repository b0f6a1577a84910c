"""Domain layer: entities, protocols and the error hierarchy."""
