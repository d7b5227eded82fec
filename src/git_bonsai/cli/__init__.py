"""Command line interface for Git Bonsai."""
