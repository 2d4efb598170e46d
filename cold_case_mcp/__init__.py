"""Cold case archive terminal: a text-adventure archive exposed as a console and an MCP server."""
