import sys

from procaudit.cli import main

sys.exit(main())
