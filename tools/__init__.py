# tools package for MCP server tools
# Modules in this package expose `get_tools() -> dict[str, dict]` mapping tool names to
# {"func", "title", "description"}. Handlers whose first parameter is `fetcher` receive the
# process-wide RoadmapFetcher from the server; the remaining parameters form the tool schema.
__all__ = []
