"""Allow running as: python -m wordforge"""

import sys

from wordforge.cli import main

sys.exit(main())
