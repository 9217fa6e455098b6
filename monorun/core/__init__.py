"""Core layer: shared models, protocols and the error taxonomy."""
