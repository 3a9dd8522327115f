import sys

from certchecker.cli import main

sys.exit(main())
