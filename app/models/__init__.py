from .admin import Administrator
from .contact import Contact

__all__ = ["Administrator", "Contact"]
