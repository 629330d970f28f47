"""Command-line interface for citeparse."""
