"""Allow running the installer with ``python -m marketplace_installer``."""

from marketplace_installer.cli.main import main

if __name__ == "__main__":
    main()
