"""LLM providers, prompts, response parsing and retries."""
