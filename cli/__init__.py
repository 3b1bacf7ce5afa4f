"""Command-line entry-point for purl."""
