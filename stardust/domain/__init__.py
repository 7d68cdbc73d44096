"""Domain Layer: value objects, entities, events and interfaces."""
