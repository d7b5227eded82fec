"""Git Bonsai - grow a bonsai tree from a git commit graph."""

__version__ = "0.1.0"
