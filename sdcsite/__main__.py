"""
Package entry point.

Allows running the tool via:

    python -m sdcsite

This simply forwards execution to sdcsite.cli.main().
"""

from sdcsite.cli import main

if __name__ == "__main__":
    main()
