"""Workshop chat backend: a single chat session in front of a hosted LLM."""
