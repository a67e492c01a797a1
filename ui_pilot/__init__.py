"""ui-pilot: screenshot-to-action-plan capture and a streamed chat agent."""

__version__ = "0.1.0"
