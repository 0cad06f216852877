import sys

from indextank.cli.main import main

sys.exit(main())
