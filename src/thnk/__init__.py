"""thnk: emotional analysis of voice journal entries."""

__version__ = "0.1.0"
