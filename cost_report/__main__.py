"""Entry point for ``python -m cost_report``."""

import sys

from cost_report.cli import main

sys.exit(main())
