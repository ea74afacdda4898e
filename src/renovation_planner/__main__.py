from renovation_planner.cli import cli

cli()
