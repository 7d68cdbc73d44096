"""Main entry point when executing stardust as a package.

This allows running the package using python -m stardust.
"""

from stardust.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
