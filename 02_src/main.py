"""Main entry point for the Telegram feedback MCP server."""

from feedback.server import run


def main():
    """Run the server. Configuration comes from the environment / .env."""
    run()


if __name__ == "__main__":
    main()
