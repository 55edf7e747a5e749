"""Allow ``python -m category_sorter``."""

import sys

from category_sorter.main import main

sys.exit(main())
