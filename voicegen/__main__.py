"""
Main entry point for the voicegen package.

Usage:
    python -m voicegen --text "..." --ref-audio ... --gpt-model ... --sovits-model ...
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
