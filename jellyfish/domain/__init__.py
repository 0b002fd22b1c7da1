"""Pure request-resolution pieces: paths, content, resources, fallback.

These modules are free of FastAPI/HTTP concerns so they can be unit-tested
in isolation and driven by the service layer.
"""
__all__ = ["paths", "content", "resources", "outcomes", "fallback"]
