"""Conversation buffering and dispatch."""

from .buffer import BufferRegistry
from .coordinator import DispatchCoordinator, IDispatchCoordinator

__all__ = ["BufferRegistry", "DispatchCoordinator", "IDispatchCoordinator"]
