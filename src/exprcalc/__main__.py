"""Allow ``python -m exprcalc``."""

from exprcalc.cli import main

if __name__ == "__main__":
    main()
