"""Xì Lác card game engine, statistics and chat-bot helpers."""

__version__ = "0.1.0"