# backend/events/__init__.py
"""
Package init: load environment variables from a .env file if present.
This runs before the package modules read their configuration with os.getenv.
"""

from dotenv import load_dotenv

load_dotenv()
