import sys

from exam_analytics.cli import main

sys.exit(main())
