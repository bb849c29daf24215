"""
Entry point for ``python -m gitup``.
"""
from gitup.cli import main


if __name__ == '__main__':
    main()
