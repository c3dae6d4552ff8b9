"""MCP tool registrations for the FileMaker server.

Each module exposes ``register(app, *, deps)`` which adds one tool to a
FastMCP application.
"""
