"""Run the gitconductor CLI with ``python -m gitconductor``."""

from gitconductor.cli import main

main()
