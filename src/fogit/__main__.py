"""Allow ``python -m fogit``."""
import sys

from fogit.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
