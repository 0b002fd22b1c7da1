"""Async use-cases that drive the domain layer off the event loop."""
