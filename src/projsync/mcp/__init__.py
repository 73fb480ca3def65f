"""MCP server host for projsync."""
