"""
DynamoDB-backed stores.

Tables (names configurable through env vars, see config_validator.py):
- user_profiles:          PK sender_id
- delivery_profiles:      PK user_id
- mother_health_metrics:  PK user_id, SK recorded_at ("<date>#<timestamp>")
- daily_checkins:         PK sender_id, SK created_at
"""

import os
import time
import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from logging_config import get_logger, log_aws_service_call
from models import (
    CheckInRecord,
    DeliveryContext,
    RecoveryMetricSample,
    SenderProfile,
)
from .base import StoreError

logger = get_logger(__name__)


def decimal_to_native(obj):
    """Convert DynamoDB Decimals (nested too) to int or float."""
    if isinstance(obj, list):
        return [decimal_to_native(i) for i in obj]
    elif isinstance(obj, dict):
        return {k: decimal_to_native(v) for k, v in obj.items()}
    elif isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        else:
            return float(obj)
    else:
        return obj


def get_dynamodb_resource(region: Optional[str] = None):
    if region is None:
        region = os.getenv('AWS_REGION', 'us-east-1')
    return boto3.resource('dynamodb', region_name=region)


class _DynamoTable:
    """Shared call wrapper: timing, logging and error translation."""

    def __init__(self, table_name: str, resource=None):
        self.table_name = table_name
        self._table = (resource or get_dynamodb_resource()).Table(table_name)

    def _call(self, operation: str, **kwargs) -> Dict[str, Any]:
        start_time = time.time()
        try:
            response = getattr(self._table, operation)(**kwargs)
        except (ClientError, BotoCoreError) as e:
            duration_ms = (time.time() - start_time) * 1000
            log_aws_service_call(
                logger, 'dynamodb', operation, False,
                duration_ms=duration_ms, error=e,
                extra={'table': self.table_name}
            )
            raise StoreError(f"DynamoDB {operation} on {self.table_name} failed: {e}") from e

        duration_ms = (time.time() - start_time) * 1000
        log_aws_service_call(
            logger, 'dynamodb', operation, True,
            duration_ms=duration_ms, extra={'table': self.table_name}
        )
        return response


class DynamoProfileStore:
    def __init__(
        self,
        profiles_table: Optional[str] = None,
        deliveries_table: Optional[str] = None,
        resource=None
    ):
        resource = resource or get_dynamodb_resource()
        self._profiles = _DynamoTable(
            profiles_table or os.getenv('PROFILE_TABLE_NAME', 'user_profiles'), resource
        )
        self._deliveries = _DynamoTable(
            deliveries_table or os.getenv('DELIVERY_TABLE_NAME', 'delivery_profiles'), resource
        )

    def get_profile(self, sender_id: str) -> Optional[SenderProfile]:
        response = self._profiles._call('get_item', Key={'sender_id': sender_id})
        item = response.get('Item')
        if not item:
            return None
        return SenderProfile.model_validate(decimal_to_native(item))

    def set_sms_consent(self, sender_id: str, consent: bool) -> None:
        try:
            self._profiles._call(
                'update_item',
                Key={'sender_id': sender_id},
                UpdateExpression='SET sms_consent = :consent',
                ConditionExpression='attribute_exists(sender_id)',
                ExpressionAttributeValues={':consent': consent},
            )
        except StoreError as e:
            cause = e.__cause__
            if isinstance(cause, ClientError) and \
                    cause.response['Error']['Code'] == 'ConditionalCheckFailedException':
                logger.warning(f"Consent update for unknown sender {sender_id} ignored")
                return
            raise

    def get_delivery_context(self, user_id: str) -> Optional[DeliveryContext]:
        response = self._deliveries._call('get_item', Key={'user_id': user_id})
        item = response.get('Item')
        if not item:
            return None
        return DeliveryContext.model_validate(decimal_to_native(item))


class DynamoMetricStore:
    def __init__(self, table_name: Optional[str] = None, resource=None):
        self._metrics = _DynamoTable(
            table_name or os.getenv('METRICS_TABLE_NAME', 'mother_health_metrics'), resource
        )

    def recent_samples(self, user_id: str, limit: int = 7) -> List[RecoveryMetricSample]:
        response = self._metrics._call(
            'query',
            KeyConditionExpression=Key('user_id').eq(user_id),
            ScanIndexForward=False,
            Limit=limit,
        )
        samples = []
        for item in response.get('Items', []):
            item = decimal_to_native(item)
            samples.append(RecoveryMetricSample(
                date=item['recorded_date'],
                energy_level=item['energy_level'],
                mood_score=item['mood_score'],
                sleep_hours=item['sleep_hours'],
                notes=item.get('notes'),
            ))
        return samples

    def append_sample(self, user_id: str, sample: RecoveryMetricSample) -> None:
        now = datetime.datetime.now(datetime.timezone.utc).isoformat()
        item = {
            'user_id': user_id,
            'recorded_at': f"{sample.date.isoformat()}#{now}",
            'recorded_date': sample.date.isoformat(),
            'energy_level': sample.energy_level,
            'mood_score': sample.mood_score,
            'sleep_hours': Decimal(str(sample.sleep_hours)),
        }
        if sample.notes:
            item['notes'] = sample.notes
        self._metrics._call('put_item', Item=item)


class DynamoCheckInStore:
    def __init__(self, table_name: Optional[str] = None, resource=None):
        self._checkins = _DynamoTable(
            table_name or os.getenv('CHECKIN_TABLE_NAME', 'daily_checkins'), resource
        )

    def save_checkin(self, record: CheckInRecord) -> None:
        self._checkins._call('put_item', Item={
            'sender_id': record.sender_id,
            'created_at': datetime.datetime.now(datetime.timezone.utc).isoformat(),
            'date': record.date.isoformat(),
            'symptoms': [tag.value for tag in record.tags],
            'risk_level': record.tier.value,
            'transcript': record.raw_text,
            'source': record.source,
        })
