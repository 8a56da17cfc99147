"""Command-line interface for svcdeploy."""
