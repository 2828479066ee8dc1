import sys

from bac_estimator.main import main

sys.exit(main() or 0)
