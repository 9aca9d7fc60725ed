from mlinstall.main import cli

cli()
