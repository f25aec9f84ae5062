# =============================================================================
# mailcompat Entry Point for `python -m mailcompat`
# =============================================================================
# This module allows mailcompat to be run as a Python module:
#
#   python -m mailcompat email.html
#
# This is equivalent to running the 'mailcompat' command after installation.
# =============================================================================

import sys

from mailcompat.cli import main

if __name__ == "__main__":
    sys.exit(main())
