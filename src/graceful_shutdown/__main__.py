import sys

from graceful_shutdown.cli import main

sys.exit(main())
