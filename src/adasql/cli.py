"""
Click-based CLI for adasql.
"""

import sys

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .commands import open_connection, run_shell
from .core.session import Session
from .domain.errors import ConnectionSetupError
from .providers.rds_data.auth import AuthenticationError

console = Console(stderr=True)

ENV_PREFIX = "ADASQL"


@click.command()
@click.version_option(version=__version__, prog_name="adasql")
@click.option(
    "--cluster",
    "-c",
    help="Aurora Database Cluster ID (if omitted, will query for DBs and connect to "
    "only one available or prompt)",
)
@click.option("--profile", "-p", help="AWS profile")
@click.option("--region", "-r", help="AWS region")
@click.option(
    "--secret",
    "-s",
    help="AWS Secrets Manager Secret Name (if omitted, will query for secrets and use "
    "the only one available or prompt)",
)
@click.option("--database", "-d", help="Initial database to use")
def cli(
    cluster: str | None,
    profile: str | None,
    region: str | None,
    secret: str | None,
    database: str | None,
) -> None:
    """Interactive SQL shell for Aurora Serverless over the RDS Data API

    Reads statements from the terminal (with tab completion) or from piped
    input. Every option can also be set through an ADASQL_* environment
    variable, e.g. ADASQL_CLUSTER.

    Examples:

        # Discover the cluster and secret, start in database 'app'
        adasql --profile dev -d app

        # Run a script; the first failing statement exits with status 1
        adasql -c my-cluster -s my-secret -d app < migrate.sql
    """
    try:
        connection = open_connection(
            profile=profile,
            region=region,
            cluster=cluster,
            secret=secret,
            database=database,
        )
    except AuthenticationError as e:
        console.print(f"[red]✗ Authentication failed:[/red] {escape(str(e))}")
        sys.exit(1)
    except ConnectionSetupError as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(1)

    session = Session(connection.backend, database=connection.config.database)
    sys.exit(run_shell(session, interactive=sys.stdin.isatty()))


def main() -> None:
    cli(auto_envvar_prefix=ENV_PREFIX)


if __name__ == "__main__":
    main()
