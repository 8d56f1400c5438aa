""" So that `python -m treelox` works the same as the `treelox` command. """
from .cmdline import main

main()
