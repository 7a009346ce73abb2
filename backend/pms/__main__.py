"""Allows `python -m pms`."""

from pms.main import main

main()
