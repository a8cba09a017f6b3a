"""``python -m mdlive``."""

from mdlive._cli import main

main()
