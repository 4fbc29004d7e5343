import sys

from codemorph.cli import main

sys.exit(main())
