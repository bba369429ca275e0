import sys

from afkbot.main import main

sys.exit(main())
