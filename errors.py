# FILE: errors.py
"""Configuration errors. All of them are fatal at startup and never retried."""


class ConfigurationError(Exception):
    """Base class for every error raised while loading the planning domain."""


class LayoutError(ConfigurationError, ValueError):
    """The facility layout document is malformed."""


class VehicleSpecError(ConfigurationError, ValueError):
    """The vehicle factsheet is malformed."""


class TaskSpecError(ConfigurationError, ValueError):
    """The task list document is malformed."""


class UnknownNodeError(ConfigurationError, KeyError):
    """An edge or task references a node identifier the graph does not know."""

    def __init__(self, node_id, context: str = "graph"):
        self.node_id = node_id
        self.context = context
        super().__init__(f"Unknown node {node_id!r} referenced by {context}")

    def __str__(self):
        # KeyError would otherwise repr() the whole message
        return self.args[0]


class DegenerateGeometryError(ConfigurationError, ValueError):
    """A speed limit or geometry would make a traversal time undefined."""
