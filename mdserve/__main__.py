import sys

from mdserve.cli import main

sys.exit(main())
