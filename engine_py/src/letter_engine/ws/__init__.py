"""
WebSocket server and event handling for the Letter Lover game.
"""

from .server import engine, manager, router

__all__ = ["engine", "manager", "router"]
