"""Local MCP bridge for the AI Distiller (``aid``) command-line tool."""

__version__ = "0.4.0"
