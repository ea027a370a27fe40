"""Command-line interface for thnk."""
