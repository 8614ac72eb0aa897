"""
Cluster and secret discovery

Finds Data API-enabled Aurora clusters and Secrets Manager secrets when they
are not given on the command line. A single candidate is used directly;
several candidates are offered as an interactive choice.
"""

from collections.abc import Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.prompt import Prompt

from adasql.domain.errors import ConnectionSetupError

console = Console()

Chooser = Callable[[str, list[str]], str]


def prompt_choice(message: str, choices: list[str]) -> str:
    """Ask the user to pick one of several names."""
    for i, choice in enumerate(choices, 1):
        console.print(f"  [cyan]{i}.[/cyan] {choice}")
    answer = Prompt.ask(message, choices=[str(i) for i in range(1, len(choices) + 1)])
    return choices[int(answer) - 1]


def list_data_api_clusters(session: boto3.Session) -> list[str]:
    """Identifiers of clusters with the HTTP endpoint (Data API) enabled."""
    paginator = session.client("rds").get_paginator("describe_db_clusters")
    cluster_ids: list[str] = []
    for page in paginator.paginate():
        cluster_ids.extend(
            cluster["DBClusterIdentifier"]
            for cluster in page.get("DBClusters", [])
            if cluster.get("HttpEndpointEnabled")
        )
    return cluster_ids


def list_secret_names(session: boto3.Session) -> list[str]:
    """Names of all secrets visible to the caller."""
    paginator = session.client("secretsmanager").get_paginator("list_secrets")
    secret_names: list[str] = []
    for page in paginator.paginate():
        secret_names.extend(secret["Name"] for secret in page.get("SecretList", []))
    return secret_names


def _select_one(names: list[str], noun: str, question: str, choose: Chooser) -> str:
    if not names:
        raise ConnectionSetupError(message=f"No {noun} found", code="NotFound")

    if len(names) == 1:
        console.print(f"[blue]Found only one {noun}:[/blue] {names[0]}")
        return names[0]

    return choose(question, names)


def get_database_cluster(session: boto3.Session, choose: Chooser = prompt_choice) -> str:
    """Pick the cluster to connect to

    Raises:
        ConnectionSetupError: If no Data API-enabled cluster exists or listing fails
    """
    try:
        cluster_ids = list_data_api_clusters(session)
    except (BotoCoreError, ClientError) as e:
        raise ConnectionSetupError(
            message=f"Failed to list database clusters: {e}", code="ListClustersFailed"
        ) from e

    return _select_one(
        cluster_ids,
        "Aurora Data API-enabled Database Cluster",
        "Which Aurora Data API-enabled Database Cluster?",
        choose,
    )


def get_secret(session: boto3.Session, choose: Chooser = prompt_choice) -> str:
    """Pick the Secrets Manager secret holding the database credentials

    Raises:
        ConnectionSetupError: If no secret exists or listing fails
    """
    try:
        secret_names = list_secret_names(session)
    except (BotoCoreError, ClientError) as e:
        raise ConnectionSetupError(
            message=f"Failed to list secrets: {e}", code="ListSecretsFailed"
        ) from e

    return _select_one(
        secret_names,
        "secret in AWS Secrets Manager",
        "Which secret?",
        choose,
    )
