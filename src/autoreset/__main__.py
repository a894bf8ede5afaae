from autoreset.cli.main import cli

cli(prog_name="autoreset")
