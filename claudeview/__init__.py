"""Read Claude Code projects, sessions, transcripts, agents, plugins and memories."""

__version__ = "0.1.0"