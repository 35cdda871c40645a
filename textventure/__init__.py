"""TextVenture — an LLM-narrated text adventure."""
