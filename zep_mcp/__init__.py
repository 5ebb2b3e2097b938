"""Zep MCP - Zep Cloud memory exposed as MCP tools.

A thin adapter that:
- Declares a fixed catalog of memory and knowledge-graph tools
- Proxies each tool call to the Zep Cloud API
- Renders the JSON responses as numbered, human-readable text
"""

__version__ = "1.0.0"
