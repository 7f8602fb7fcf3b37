"""Command line interface for SportAI."""
