"""Command-line interface."""
import sys

from sparseconv.main import main

if __name__ == "__main__":
    sys.exit(main())
