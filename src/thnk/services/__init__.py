"""Analysis orchestration and pattern summaries."""
