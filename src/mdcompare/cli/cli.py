"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdcompare.cli.commands import (
    add_cmd, compare_cmd, compare_production_cmd, diff_cmd, init_cmd,
    list_cmd, promote_cmd, rollback_cmd, upload_cmd, versions_cmd,
)


app = typer.Typer(name="mdcompare", no_args_is_help=True, help="Markdown document versioning and comparison")

app.command(name="init")(init_cmd)
app.command(name="add")(add_cmd)
app.command(name="list")(list_cmd)
app.command(name="upload")(upload_cmd)
app.command(name="versions")(versions_cmd)
app.command(name="compare")(compare_cmd)
app.command(name="compare-production")(compare_production_cmd)
app.command(name="rollback")(rollback_cmd)
app.command(name="promote")(promote_cmd)
app.command(name="diff")(diff_cmd)
