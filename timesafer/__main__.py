"""Entry point for `python -m timesafer` command."""

from timesafer.cli import main_entry

if __name__ == "__main__":
    main_entry()
