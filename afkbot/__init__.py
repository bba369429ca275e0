"""AFK presence bot for Minecraft servers."""

__version__ = "1.0.0"
