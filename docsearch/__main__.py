"""Entry point for `python -m docsearch`."""

import sys

from docsearch.cli import main

sys.exit(main())
