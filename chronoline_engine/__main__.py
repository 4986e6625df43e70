"""Entry point for ``python -m chronoline_engine``."""

from chronoline_engine.cli import main

if __name__ == "__main__":
    main()
