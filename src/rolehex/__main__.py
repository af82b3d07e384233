"""Entry point for 'python -m rolehex' command."""

from rolehex.cli import main

if __name__ == "__main__":
    main()
