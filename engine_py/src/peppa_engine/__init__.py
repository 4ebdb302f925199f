"""Peppa: four-player trick-taking game engine with bot opponents."""

__version__ = "1.0.0"
