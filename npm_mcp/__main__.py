"""Allow ``python -m npm_mcp``."""

from npm_mcp.cli import main

if __name__ == "__main__":
    main()
