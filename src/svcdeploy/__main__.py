"""Allow running as `python -m svcdeploy`."""

from svcdeploy.cli.app import main

main()
