import sys

from weatherbar.cli import main

sys.exit(main())
