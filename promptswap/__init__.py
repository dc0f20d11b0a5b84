"""PromptSwap swap API package.

Exposes the route layer for swap actions, request correlation helpers and the
generic table-by-name database client.
"""

__all__: list[str] = []
