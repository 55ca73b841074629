"""Allow running as `python -m m8build`."""

from m8build.cli import main

if __name__ == "__main__":
    main()
