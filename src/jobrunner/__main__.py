import sys

from jobrunner.main import main

sys.exit(main())
