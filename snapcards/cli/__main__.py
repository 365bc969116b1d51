"""Allow ``python -m snapcards.cli``."""

from snapcards.cli.main import run

run()
