"""
Palate Configuration
Centralized settings for the profile mapper
"""

import os

# OpenAI Model Configuration
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TEMPERATURE = 0.15  # Low randomness keeps mappings stable
OPENAI_MAX_TOKENS = 900  # A full profile fits well under this

# Bump when the system instruction or few-shot examples change
PROMPT_VERSION = "2"
