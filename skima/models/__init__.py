from .base import Entity, Repository

__all__ = ["Entity", "Repository"]
