import sys

from keylight.cli import main

sys.exit(main())
