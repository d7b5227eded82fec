"""Core graph and layout logic for Git Bonsai."""
