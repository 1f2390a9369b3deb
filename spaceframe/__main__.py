"""python -m spaceframe model.json"""

import sys

from .cli import main

sys.exit(main())
