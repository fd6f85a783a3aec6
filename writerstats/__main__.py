"""Allow running as: python -m writerstats"""

import sys

from writerstats.cli import main

if __name__ == "__main__":
    sys.exit(main())
