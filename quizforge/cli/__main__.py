"""Allow ``python -m quizforge.cli`` execution."""

import sys

from quizforge.cli.quiz import main

sys.exit(main())
