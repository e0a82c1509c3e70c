from .converter import GenericConverter

__all__ = ["GenericConverter"]
