"""Allow ``python -m propcheck``."""

from propcheck.cli import main

if __name__ == "__main__":
    main()
