from .envelope import Envelope

__all__ = ["Envelope"]
