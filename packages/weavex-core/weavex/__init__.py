"""weavex — web search plus a local tool-calling model for autonomous research."""

__version__ = "0.1.0"
