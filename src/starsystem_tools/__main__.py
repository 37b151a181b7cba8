"""Allow ``python -m starsystem_tools``."""

import sys

from starsystem_tools.cli.main import main

sys.exit(main())
