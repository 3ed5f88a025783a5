# agentsync Output Module
# Rich console output and JSON documents

from agentsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
