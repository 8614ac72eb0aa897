"""
AWS Authentication Helpers

Provides session and identity utilities for connecting to AWS using named
profiles from ~/.aws/config and ~/.aws/credentials, or the standard
environment credential chain.
"""

import os
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from adasql.models import AWSInfo


class AuthenticationError(Exception):
    """Raised when authentication fails"""

    pass


def create_aws_session(
    profile: Optional[str] = None, region: Optional[str] = None
) -> boto3.Session:
    """Create a boto3 session

    Credential priority follows boto3:
    1. Named profile (if profile specified)
    2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, ...)
    3. Default profile, then container/instance credentials

    Args:
        profile: AWS profile name. If None, uses the default credential chain.
        region: AWS region. If None, uses the profile or environment region.

    Returns:
        boto3 Session with a resolved region

    Raises:
        AuthenticationError: If the profile is unknown or no region is configured
    """
    try:
        session = boto3.Session(profile_name=profile, region_name=region)
    except BotoCoreError as e:
        raise AuthenticationError(_format_auth_error(e, profile)) from e

    if not session.region_name:
        raise AuthenticationError(
            "No AWS region configured\n"
            "\nTroubleshooting:\n"
            "  Option 1 - Pass --region (or set ADASQL_REGION)\n"
            "  Option 2 - export AWS_REGION=us-east-1\n"
            "  Option 3 - Set 'region' for the profile in ~/.aws/config"
        )

    return session


def get_aws_info(session: boto3.Session) -> AWSInfo:
    """Resolve the caller identity for a session

    Args:
        session: boto3 Session to inspect

    Returns:
        AWSInfo with partition, account, region, user ARN and account alias

    Raises:
        AuthenticationError: If the caller identity cannot be retrieved
    """
    try:
        identity = session.client("sts").get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        raise AuthenticationError(_format_auth_error(e, session.profile_name)) from e

    user_arn = identity["Arn"]
    return AWSInfo(
        partition=user_arn.split(":")[1],
        account_id=identity["Account"],
        region=session.region_name,
        user_arn=user_arn,
        account_alias=get_account_alias(session),
    )


def get_account_alias(session: boto3.Session) -> Optional[str]:
    """Get the account alias, if one is set and visible to the caller

    Args:
        session: Authenticated boto3 Session

    Returns:
        First account alias or None
    """
    try:
        aliases = session.client("iam").list_account_aliases().get("AccountAliases", [])
    except (BotoCoreError, ClientError):
        return None
    return aliases[0] if aliases else None


def check_profile_exists(profile: str) -> bool:
    """Check if an AWS profile is defined in the shared config files

    Args:
        profile: Profile name to check

    Returns:
        True if profile exists, False otherwise
    """
    try:
        return profile in boto3.Session().available_profiles
    except BotoCoreError:
        return False


def _format_auth_error(error: Exception, profile: Optional[str]) -> str:
    """Format authentication error with helpful troubleshooting info

    Args:
        error: Original exception
        profile: Profile that was attempted (if any)

    Returns:
        Formatted error message with troubleshooting steps
    """
    messages = ["Failed to authenticate with AWS"]

    if profile:
        messages.append(f"Profile: {profile}")

        if not check_profile_exists(profile):
            messages.append(f"\n⚠️  Profile '{profile}' not found in ~/.aws/config")
            messages.append("\nTroubleshooting:")
            messages.append("  1. Check ~/.aws/config and ~/.aws/credentials exist")
            messages.append(f"  2. Verify a [profile {profile}] section exists")
            messages.append(f"  3. Run 'aws configure --profile {profile}'")
    else:
        messages.append("Profile: default credential chain")

        has_env_vars = bool(os.getenv("AWS_ACCESS_KEY_ID") and os.getenv("AWS_SECRET_ACCESS_KEY"))
        has_default = check_profile_exists("default")

        if not has_env_vars and not has_default:
            messages.append("\n⚠️  No credentials configured")
            messages.append("\nTroubleshooting:")
            messages.append("  Option 1 - Environment variables:")
            messages.append("    export AWS_ACCESS_KEY_ID=AKIA...")
            messages.append("    export AWS_SECRET_ACCESS_KEY=...")
            messages.append("  Option 2 - Profile:")
            messages.append("    aws configure")

    messages.append(f"\nError details: {error}")

    return "\n".join(messages)
