"""MCP server: tool operations, rendering and FastMCP wiring."""
