"""Run Docker daemon commands from task definitions."""

__version__ = "0.3.0"
