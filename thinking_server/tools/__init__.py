"""
Stateless helper tools served next to the sequential thinking tool.

They are registered from thinking_server.server when the `full` tool profile
is active.
"""
