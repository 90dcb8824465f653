"""
espwatch Module Entry Point
============================

Allows running the espwatch CLI via: python -m espwatch
"""

from espwatch.cli import main

if __name__ == "__main__":
    main()
