import sys

from .interface.command_line import main

sys.exit(main())
