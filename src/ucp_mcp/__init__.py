"""MCP server for Universal Commerce Protocol schemas, API specs and merchant discovery."""
