# lambdas/error_monitor/dedup_store.py
import time
from typing import Callable, Optional

import boto3

from .models import CallResult, ERROR_WINDOW_SECONDS, get_settings

PRESENCE_MARKER = "true"


class DynamoDBTTLStore:
    """
    A get/put-with-expiry key-value store backed by a DynamoDB table whose
    Time-To-Live attribute is `ttl`. Errors from DynamoDB are raised to the caller.
    """
    KEY_ATTRIBUTE = "fingerprint"
    VALUE_ATTRIBUTE = "value"
    TTL_ATTRIBUTE = "ttl"

    def __init__(self, table=None, clock: Callable[[], float] = time.time):
        if table is None:
            settings = get_settings()
            dynamodb = boto3.resource('dynamodb', region_name=settings.aws_region)
            table = dynamodb.Table(settings.dedup_table_name)
        self.table = table
        self.clock = clock

    def get(self, key: str) -> Optional[str]:
        response = self.table.get_item(Key={self.KEY_ATTRIBUTE: key})
        item = response.get('Item')
        if not item:
            return None

        # DynamoDB deletes expired items lazily (up to a couple of days late),
        # so an item past its ttl is treated as already gone.
        expires_at = item.get(self.TTL_ATTRIBUTE)
        if expires_at is not None and int(expires_at) <= int(self.clock()):
            return None
        return item.get(self.VALUE_ATTRIBUTE)

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self.table.put_item(
            Item={
                self.KEY_ATTRIBUTE: key,
                self.VALUE_ATTRIBUTE: value,
                self.TTL_ATTRIBUTE: int(self.clock()) + ttl_seconds,
            }
        )


class DedupStore:
    """
    Checks and records error fingerprints against a TTL store.

    Lookups fail open: if the store cannot be read the error is treated as new,
    since a duplicate Slack message is cheaper than a missed error.
    """
    def __init__(self, store=None, window_seconds: int = ERROR_WINDOW_SECONDS):
        self.store = store if store is not None else DynamoDBTTLStore()
        self.window_seconds = window_seconds

    def lookup(self, fingerprint: str) -> CallResult:
        try:
            return CallResult.success(self.store.get(fingerprint))
        except Exception as e:
            return CallResult.failure(str(e))

    def is_duplicate(self, fingerprint: str) -> bool:
        result = self.lookup(fingerprint)
        if not result:
            print(f" -> ⚠️ Error checking duplicate for hash {fingerprint}: {result.error}. Treating as new error.")
            return False
        return result.value is not None

    def record(self, fingerprint: str) -> CallResult:
        try:
            self.store.put(fingerprint, PRESENCE_MARKER, self.window_seconds)
        except Exception as e:
            print(f" -> ❌ Error storing hash {fingerprint}: {e}")
            return CallResult.failure(str(e))
        print(f" -> Stored hash {fingerprint} for {self.window_seconds} seconds.")
        return CallResult.success()
