"""
Entry point for running Delcom Client as a module.

This allows users to run the CLI using:
    python -m delcom_client [command] [options]
"""

from delcom_client.cli.app import main

if __name__ == "__main__":
    main()
