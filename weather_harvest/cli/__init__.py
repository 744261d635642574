"""Command line entrypoint (python -m weather_harvest.cli)."""
