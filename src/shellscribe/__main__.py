import sys

from shellscribe.cli import main

sys.exit(main())
