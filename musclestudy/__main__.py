"""
Entry point for running muscle-study as a module.

Usage:
    python -m musclestudy stats
    python -m musclestudy review "Biceps brachii" "Deltoideus"
    python -m musclestudy --help
"""
from .cli import main

if __name__ == "__main__":
    main()
