import sys

from feedtui.cli import main

sys.exit(main())
