"""
CLI entry point for the ur5e-pmp-server command.

This module provides the command-line interface for starting the planning server.
"""

from ur5e_pmp.server.controller import main


def main_entry():
    """Entry point for the ur5e-pmp-server command."""
    raise SystemExit(main())


if __name__ == "__main__":
    main_entry()
