"""
Module entry point.

Usage:
    python -m yopmail inbox test
    python -m yopmail read test <mail id>
    python -m yopmail delete test <mail id>
    python -m yopmail domains
"""

from __future__ import annotations
from yopmail.cli import main

if __name__ == "__main__":
    main()
