# SPDX-License-Identifier: MIT
"""Allow running orcabuild as ``python -m orcabuild``."""

import sys

from orcabuild.cli import main

sys.exit(main())
