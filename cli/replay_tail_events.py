import os
import json
import argparse
from pathlib import Path

import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv

# Load environment variables from a .env file for local testing
load_dotenv()

DEFAULT_EVENTS_FILE = Path(__file__).parent / "sample_tail_events.json"


def load_events(path) -> list:
    """Reads a JSON file holding a list of tail events (or {"events": [...]})."""
    with open(path, 'r') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of tail events in '{path}'.")
    return data


def setup_dedup_table(table_name: str, region: str):
    """Creates the dedup table with TTL enabled if it doesn't exist."""
    dynamodb = boto3.resource('dynamodb', region_name=region)
    try:
        dynamodb.meta.client.describe_table(TableName=table_name)
        print(f"DynamoDB table '{table_name}' already exists.")
        return
    except ClientError as e:
        if e.response['Error']['Code'] != 'ResourceNotFoundException':
            raise

    print(f"DynamoDB table '{table_name}' not found. Creating it now...")
    dynamodb.create_table(
        TableName=table_name,
        KeySchema=[{'AttributeName': 'fingerprint', 'KeyType': 'HASH'}],
        AttributeDefinitions=[{'AttributeName': 'fingerprint', 'AttributeType': 'S'}],
        BillingMode='PAY_PER_REQUEST',
    )
    dynamodb.Table(table_name).wait_until_exists()
    dynamodb.meta.client.update_time_to_live(
        TableName=table_name,
        TimeToLiveSpecification={'Enabled': True, 'AttributeName': 'ttl'},
    )
    print(f"Table '{table_name}' created with TTL on 'ttl'.")


def invoke_deployed(function_name: str, events: list, region: str) -> dict:
    """Sends the events to a deployed Error Monitor Lambda and returns its response."""
    lambda_client = boto3.client('lambda', region_name=region)
    response = lambda_client.invoke(
        FunctionName=function_name,
        InvocationType='RequestResponse',
        Payload=json.dumps({"events": events}).encode('utf-8'),
    )
    return json.loads(response['Payload'].read())


def run_local(events: list) -> dict:
    """Runs the handler in this process, using your live AWS credentials."""
    from lambdas.error_monitor.app import handler
    return handler({"events": events}, None)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Replay tail events through the Error Monitor.")
    parser.add_argument("events_file", nargs="?", default=str(DEFAULT_EVENTS_FILE),
                        help="JSON file with a list of tail events")
    parser.add_argument("--function-name", help="Invoke this deployed Lambda instead of running locally")
    parser.add_argument("--setup-table", action="store_true",
                        help="Create the dedup table with TTL enabled before replaying")
    parser.add_argument("--region", default=os.environ.get("AWS_REGION", "us-east-1"))
    args = parser.parse_args(argv)

    events = load_events(args.events_file)
    print(f"--- Replaying {len(events)} tail event(s) from {args.events_file} ---")

    if args.setup_table:
        setup_dedup_table(os.environ.get("DEDUP_TABLE_NAME", "ErrorDedupTable"), args.region)

    if args.function_name:
        result = invoke_deployed(args.function_name, events, args.region)
    else:
        result = run_local(events)

    print(json.dumps(result, indent=2))
    return result


if __name__ == "__main__":
    main()
