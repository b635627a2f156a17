"""Service layer: bridge, channel, configuration and dock logic.

Services may import from domain and infrastructure layers.
They must never import from commands, output, or config.
"""
