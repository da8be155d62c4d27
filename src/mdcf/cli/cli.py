"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdcf.cli.commands import config_cmd, convert_cmd, main_callback, merge_cmd, title_cmd, to_md_cmd


app = typer.Typer(name="mdcf", no_args_is_help=True, help="Markdown <-> Confluence ADF conversion and merge")

app.callback()(main_callback)
app.command(name="convert")(convert_cmd)
app.command(name="to-md")(to_md_cmd)
app.command(name="merge")(merge_cmd)
app.command(name="title")(title_cmd)
app.command(name="config")(config_cmd)
