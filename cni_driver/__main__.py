"""Allow running as ``python -m cni_driver``."""

import sys

from cni_driver.main import main

sys.exit(main())
