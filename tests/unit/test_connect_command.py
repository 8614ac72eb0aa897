"""
Unit tests for the connect command (startup resolution and probe).
"""

from unittest.mock import MagicMock, Mock

import pytest
from botocore.exceptions import ClientError

from adasql.commands import connect as connect_module
from adasql.commands.connect import PROBE_SQL, open_connection
from adasql.domain.errors import ConnectionSetupError
from adasql.models import AWSInfo

AWS = AWSInfo(
    partition="aws",
    account_id="123456789012",
    region="us-east-1",
    user_arn="arn:aws:iam::123456789012:user/jane",
    account_alias=None,
)


@pytest.fixture
def rds_data_client() -> Mock:
    client = Mock()
    client.execute_statement.return_value = {"records": [[{"longValue": 1}]]}
    return client


@pytest.fixture
def aws_session(monkeypatch, rds_data_client) -> Mock:
    session = Mock()
    session.client.side_effect = lambda service: {"rds-data": rds_data_client}[service]
    monkeypatch.setattr(connect_module, "create_aws_session", lambda profile, region: session)
    monkeypatch.setattr(connect_module, "get_aws_info", lambda _session: AWS)
    return session


def test_explicit_cluster_and_secret(aws_session, rds_data_client) -> None:
    choose = MagicMock()

    connection = open_connection(
        profile="dev",
        region="us-east-1",
        cluster="demo",
        secret="demo-creds",
        database="app",
        choose=choose,
    )

    assert connection.config.database == "app"
    assert connection.backend.resource_arn == "arn:aws:rds:us-east-1:123456789012:cluster:demo"
    assert connection.backend.secret_arn == (
        "arn:aws:secretsmanager:us-east-1:123456789012:secret:demo-creds"
    )
    assert rds_data_client.execute_statement.call_args.kwargs["sql"] == PROBE_SQL
    choose.assert_not_called()


def test_discovers_missing_cluster_and_secret(monkeypatch, aws_session) -> None:
    seen = {}

    def _cluster(session, choose):
        seen["cluster_session"] = session
        return "found-cluster"

    monkeypatch.setattr(connect_module, "get_database_cluster", _cluster)
    monkeypatch.setattr(connect_module, "get_secret", lambda session, choose: "found-secret")

    connection = open_connection()

    assert seen["cluster_session"] is aws_session
    assert connection.config.cluster_id == "found-cluster"
    assert connection.config.secret_name == "found-secret"
    assert connection.config.database is None


def test_probe_failure(aws_session, rds_data_client) -> None:
    rds_data_client.execute_statement.side_effect = ClientError(
        {"Error": {"Code": "ForbiddenException", "Message": "access denied"}},
        "ExecuteStatement",
    )

    with pytest.raises(ConnectionSetupError) as exc_info:
        open_connection(cluster="demo", secret="demo-creds")

    assert exc_info.value.code == "ForbiddenException"
    assert exc_info.value.message == (
        "Failed to execute test statement ('SELECT 1;') against the database: "
        "access denied (ForbiddenException)"
    )
