import sys

from oilsweep.cli import main

sys.exit(main())
