"""Core domain types: models and the error taxonomy."""
