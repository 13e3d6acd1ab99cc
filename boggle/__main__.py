import sys

from boggle.cli import main

sys.exit(main())
