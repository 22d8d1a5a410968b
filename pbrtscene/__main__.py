import sys

from pbrtscene.cli import main

sys.exit(main())
