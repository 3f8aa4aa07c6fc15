from .validator import ResourceValidator

__all__ = ["ResourceValidator"]
