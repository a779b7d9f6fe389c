"""
Main entry point for cleansift when run as a module.

Allows execution via: python -m cleansift

cleansift/src/cleansift/__main__.py
"""

from .cli import main

if __name__ == "__main__":
    main()
