"""Entry point for 'python -m collectionhub'."""

from collectionhub.cli import main

if __name__ == "__main__":
    main()
