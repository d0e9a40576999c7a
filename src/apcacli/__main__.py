"""Allow running the client with ``python -m apcacli``."""

import sys

from apcacli.cli import main

sys.exit(main())
