"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .media_storage import LocalMediaStorage

__all__ = ['LocalMediaStorage']
