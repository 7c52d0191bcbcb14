"""Entry point for ``python -m alpinekit``."""

import sys

from .cli import main


sys.exit(main())
