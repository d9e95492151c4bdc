import sys

from .run_delete_benchmark import main

sys.exit(main())
