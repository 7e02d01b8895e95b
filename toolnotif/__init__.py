"""Watch tool status files and post them to a dashboard from a background daemon."""

__version__ = "0.1.0"