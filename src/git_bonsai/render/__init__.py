"""SVG rendering for bonsai layouts."""
