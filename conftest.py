"""Global pytest configuration."""

import os

# Blank out the API key before any imports so tests never pick up a real one
# from the environment or a local .env file
os.environ["OPENAI_API_KEY"] = ""
