"""
Connect Command Implementation

Resolves AWS credentials, region and caller identity, selects the cluster and
secret, and verifies that the Data API answers before the shell starts.
"""

from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from adasql.domain.errors import BackendError, ConnectionSetupError
from adasql.models import ConnectionConfig
from adasql.providers.rds_data.auth import create_aws_session, get_aws_info
from adasql.providers.rds_data.backend import RdsDataBackend
from adasql.providers.rds_data.discovery import (
    Chooser,
    get_database_cluster,
    get_secret,
    prompt_choice,
)

console = Console()

PROBE_SQL = "SELECT 1;"


@dataclass
class Connection:
    """Resolved connection: configuration plus a ready backend."""

    config: ConnectionConfig
    backend: RdsDataBackend


def _show(label: str, value: str) -> None:
    console.print(f"[blue]{label}:[/blue] {escape(value)}")


def open_connection(
    profile: str | None = None,
    region: str | None = None,
    cluster: str | None = None,
    secret: str | None = None,
    database: str | None = None,
    choose: Chooser = prompt_choice,
) -> Connection:
    """Resolve everything needed to talk to the Data API

    Args:
        profile: AWS profile name (None for the default credential chain)
        region: AWS region (None for the profile/environment region)
        cluster: Aurora cluster identifier (None to discover)
        secret: Secrets Manager secret name (None to discover)
        database: Initial database
        choose: Interactive chooser used when discovery finds several candidates

    Returns:
        Connection with validated config and backend

    Raises:
        AuthenticationError: If credentials or identity cannot be resolved
        ConnectionSetupError: If no cluster/secret is found or the probe fails
    """
    _show("Using AWS Profile", profile or "From local environment")
    _show("Using AWS Region", region or "From local environment")

    session = create_aws_session(profile, region)
    aws = get_aws_info(session)

    _show("AWS Account", aws.account_id)
    _show("AWS Region", aws.region)
    _show("AWS User", aws.user_name)
    _show("AWS Account Alias", aws.account_alias or "(none)")

    cluster_id = cluster or get_database_cluster(session, choose)
    secret_name = secret or get_secret(session, choose)

    config = ConnectionConfig(
        aws=aws, cluster_id=cluster_id, secret_name=secret_name, database=database
    )

    console.print("\nConnecting with the following configuration:")
    _show("  RDS Aurora Cluster ID", config.cluster_id)
    _show("  Secrets Manager Secret Name", config.secret_name)
    _show("  Database", config.database or "(none)")

    backend = RdsDataBackend(
        session.client("rds-data"), config.resource_arn, config.secret_arn
    )
    probe(backend)

    return Connection(config=config, backend=backend)


def probe(backend: RdsDataBackend) -> None:
    """Run a trivial statement to prove the cluster and secret work

    Raises:
        ConnectionSetupError: If the statement fails
    """
    try:
        backend.execute_statement(PROBE_SQL)
    except BackendError as e:
        raise ConnectionSetupError(
            message=(
                f"Failed to execute test statement ('{PROBE_SQL}') against the database: "
                f"{e.describe()}"
            ),
            code=e.code,
        ) from e
