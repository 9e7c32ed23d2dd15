"""Gateway application layer: the five menu operations behind `/api`."""
