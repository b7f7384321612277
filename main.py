#!/usr/bin/env python3
"""Pomobar — entry point.

Run with:
    python main.py
    python -m pomobar
"""

from pomobar.__main__ import main


if __name__ == "__main__":
    main()
