from scribe.cli.app import cli

cli()
