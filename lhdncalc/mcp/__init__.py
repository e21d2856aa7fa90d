"""MCP server exposing LHDN Calc tools."""
