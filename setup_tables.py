#!/usr/bin/env python3
"""
DynamoDB Table Setup Script

Creates all required DynamoDB tables for the Aarogya triage & recovery API:
- user_profiles: SMS sender profiles (language, consent)
- delivery_profiles: delivery type and date per app user
- mother_health_metrics: daily energy / mood / sleep samples
- daily_checkins: triaged SMS check-ins

Table names follow the *_TABLE_NAME environment variables.
All tables use PAY_PER_REQUEST billing mode for cost efficiency.
"""

import boto3
import sys
import os
from botocore.exceptions import ClientError
from typing import Dict, List, NamedTuple, Optional, Tuple

from logging_config import setup_logging, get_logger, log_error

logger = get_logger(__name__)


class TableDefinition(NamedTuple):
    env_var: str
    default_name: str
    partition_key: str
    sort_key: Optional[str] = None


TABLE_DEFINITIONS = (
    TableDefinition('PROFILE_TABLE_NAME', 'user_profiles', 'sender_id'),
    TableDefinition('DELIVERY_TABLE_NAME', 'delivery_profiles', 'user_id'),
    TableDefinition('METRICS_TABLE_NAME', 'mother_health_metrics', 'user_id', 'recorded_at'),
    TableDefinition('CHECKIN_TABLE_NAME', 'daily_checkins', 'sender_id', 'created_at'),
)


def table_name_for(definition: TableDefinition) -> str:
    return os.getenv(definition.env_var, definition.default_name)


def required_table_names() -> List[str]:
    return [table_name_for(d) for d in TABLE_DEFINITIONS]


def get_dynamodb_client(region: str = None):
    """
    Get DynamoDB client for the specified region.

    Args:
        region: AWS region (defaults to AWS_REGION env var or us-east-1)

    Returns:
        boto3 DynamoDB client
    """
    if region is None:
        region = os.getenv('AWS_REGION', 'us-east-1')

    return boto3.client('dynamodb', region_name=region)


def table_exists(client, table_name: str) -> bool:
    """
    Check if a DynamoDB table exists.

    Args:
        client: boto3 DynamoDB client
        table_name: Name of the table to check

    Returns:
        True if table exists, False otherwise
    """
    try:
        client.describe_table(TableName=table_name)
        return True
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceNotFoundException':
            return False
        raise


def build_create_table_request(definition: TableDefinition, table_name: str) -> Dict:
    key_schema = [{'AttributeName': definition.partition_key, 'KeyType': 'HASH'}]
    attributes = [{'AttributeName': definition.partition_key, 'AttributeType': 'S'}]

    if definition.sort_key:
        key_schema.append({'AttributeName': definition.sort_key, 'KeyType': 'RANGE'})
        attributes.append({'AttributeName': definition.sort_key, 'AttributeType': 'S'})

    return {
        'TableName': table_name,
        'KeySchema': key_schema,
        'AttributeDefinitions': attributes,
        'BillingMode': 'PAY_PER_REQUEST',
        'Tags': [
            {
                'Key': 'Application',
                'Value': 'AarogyaTriageAPI'
            },
            {
                'Key': 'Environment',
                'Value': os.getenv('ENVIRONMENT', 'development')
            }
        ],
    }


def create_table(client, definition: TableDefinition, table_name: Optional[str] = None):
    table_name = table_name or table_name_for(definition)
    logger.info(f"Creating table: {table_name}")
    print(f"Creating table: {table_name}")

    response = client.create_table(**build_create_table_request(definition, table_name))

    logger.info(f"Table {table_name} created successfully")
    print(f"✓ Table {table_name} created successfully")
    return response


def wait_for_table_active(client, table_name: str, max_attempts: int = 30):
    """
    Wait for a table to become active.

    Args:
        client: boto3 DynamoDB client
        table_name: Name of the table
        max_attempts: Maximum number of attempts (default: 30)
    """
    print(f"Waiting for {table_name} to become active...")
    waiter = client.get_waiter('table_exists')
    waiter.wait(
        TableName=table_name,
        WaiterConfig={
            'Delay': 2,
            'MaxAttempts': max_attempts
        }
    )
    print(f"✓ Table {table_name} is active")


def validate_required_tables(client, required_tables: List[str]) -> Dict[str, bool]:
    """
    Validate that all required tables exist.

    Returns:
        Dictionary mapping table names to existence status
    """
    results = {}
    for table_name in required_tables:
        exists = table_exists(client, table_name)
        results[table_name] = exists
        status = "✓ EXISTS" if exists else "✗ MISSING"
        print(f"{status}: {table_name}")

    return results


def setup_all_tables(region: str = None, skip_existing: bool = True, client=None) -> Tuple[List[str], List[str]]:
    """
    Create all required DynamoDB tables.

    Args:
        region: AWS region (defaults to AWS_REGION env var or us-east-1)
        skip_existing: If True, skip tables that already exist (default: True)

    Returns:
        (created, skipped) table names
    """
    client = client or get_dynamodb_client(region)

    print("=" * 60)
    print("DynamoDB Table Setup")
    print("=" * 60)
    print(f"Region: {region or os.getenv('AWS_REGION', 'us-east-1')}")
    print(f"Skip existing: {skip_existing}")
    print()

    created_tables = []
    skipped_tables = []

    for definition in TABLE_DEFINITIONS:
        table_name = table_name_for(definition)
        if skip_existing and table_exists(client, table_name):
            print(f"⊘ Table {table_name} already exists, skipping...")
            skipped_tables.append(table_name)
            continue

        try:
            create_table(client, definition, table_name)
            created_tables.append(table_name)
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceInUseException':
                print(f"⊘ Table {table_name} already exists")
                skipped_tables.append(table_name)
            else:
                print(f"✗ Error creating table {table_name}: {str(e)}")
                raise

    if created_tables:
        print()
        print("Waiting for tables to become active...")
        for table_name in created_tables:
            wait_for_table_active(client, table_name)

    print()
    print("=" * 60)
    print("Setup Summary")
    print("=" * 60)
    print(f"Created: {len(created_tables)} table(s)")
    for table in created_tables:
        print(f"  ✓ {table}")

    print(f"Skipped: {len(skipped_tables)} table(s)")
    for table in skipped_tables:
        print(f"  ⊘ {table}")

    print()
    print("✓ Setup complete!")
    return created_tables, skipped_tables


def main():
    """Main entry point for the script."""
    import argparse

    setup_logging()

    parser = argparse.ArgumentParser(
        description='Create DynamoDB tables for the Aarogya triage & recovery API'
    )
    parser.add_argument(
        '--region',
        help='AWS region (default: AWS_REGION env var or us-east-1)',
        default=None
    )
    parser.add_argument(
        '--force',
        action='store_true',
        help='Attempt to create tables even if they exist (will fail if they exist)'
    )
    parser.add_argument(
        '--validate',
        action='store_true',
        help='Only validate that required tables exist, do not create'
    )

    args = parser.parse_args()

    logger.info("Starting DynamoDB table setup script")
    logger.info(f"Region: {args.region or os.getenv('AWS_REGION', 'us-east-1')}")

    try:
        if args.validate:
            client = get_dynamodb_client(args.region)

            print("=" * 60)
            print("Validating Required Tables")
            print("=" * 60)
            print()

            results = validate_required_tables(client, required_table_names())

            print()
            if all(results.values()):
                print("✓ All required tables exist")
                sys.exit(0)
            missing = [name for name, exists in results.items() if not exists]
            print(f"✗ Missing tables: {', '.join(missing)}")
            print()
            print("Run without --validate to create missing tables")
            sys.exit(1)

        setup_all_tables(region=args.region, skip_existing=not args.force)
        logger.info("Table setup completed successfully")
        sys.exit(0)

    except ClientError as e:
        log_error(logger, e, "Failed to setup DynamoDB tables")
        print(f"\n✗ Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
