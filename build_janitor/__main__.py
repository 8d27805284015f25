"""Allow ``python -m build_janitor``."""

import sys

from build_janitor.cli import main

sys.exit(main())
