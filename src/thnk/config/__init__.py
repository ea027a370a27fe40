"""Configuration loading for thnk."""
