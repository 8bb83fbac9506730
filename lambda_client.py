"""
Thin wrapper around AWS Lambda invocation.

Used for side effects that must never hold up an SMS reply (emergency contact
alerts), so the common path is an ``Event`` (asynchronous) invocation: AWS
queues the call and returns 202 without waiting for the function.
"""

import os
import json
import time
from typing import Dict, Any, Literal, Optional

import boto3
from botocore.exceptions import ClientError, BotoCoreError

from logging_config import get_logger, log_error, log_aws_service_call

logger = get_logger(__name__)

InvocationType = Literal['RequestResponse', 'Event']


class LambdaInvocationError(Exception):
    """Custom exception for Lambda invocation errors."""
    pass


def get_lambda_client():
    region = os.getenv('AWS_REGION', os.getenv('AWS_DEFAULT_REGION', 'us-east-1'))
    return boto3.client('lambda', region_name=region)


def invoke_lambda(
    function_arn: Optional[str],
    payload: Dict[str, Any],
    invocation_type: InvocationType = 'Event'
) -> Dict[str, Any]:
    """
    Invoke a Lambda function.

    Args:
        function_arn: Function to invoke.
        payload: JSON-serialisable event.
        invocation_type: 'Event' (default, fire-and-forget) or
                         'RequestResponse' (wait for the result).

    Returns:
        {'status_code': int} for Event invocations, plus 'payload' with the
        parsed function result for RequestResponse invocations.

    Raises:
        ValueError: invalid invocation type or missing ARN.
        LambdaInvocationError: the call failed or the function raised.
    """
    if invocation_type not in ('RequestResponse', 'Event'):
        raise ValueError(
            f"Invalid invocation_type: {invocation_type}. "
            "Must be 'RequestResponse' or 'Event'"
        )
    if not function_arn:
        raise ValueError("function_arn must be provided")

    extra = {'function_arn': function_arn, 'invocation_type': invocation_type}
    start_time = time.time()

    try:
        response = get_lambda_client().invoke(
            FunctionName=function_arn,
            InvocationType=invocation_type,
            Payload=json.dumps(payload, ensure_ascii=False).encode('utf-8')
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        log_error(logger, e, "AWS ClientError invoking Lambda", {**extra, 'error_code': error_code})
        raise LambdaInvocationError(f"Failed to invoke Lambda function ({error_code})") from e
    except BotoCoreError as e:
        log_error(logger, e, "BotoCoreError invoking Lambda", extra)
        raise LambdaInvocationError(f"AWS SDK error: {str(e)}") from e

    duration_ms = (time.time() - start_time) * 1000
    status_code = response.get('StatusCode', 0)
    result: Dict[str, Any] = {'status_code': status_code}

    if invocation_type == 'RequestResponse':
        body = response.get('Payload')
        try:
            result['payload'] = json.loads(body.read()) if body else {}
        except json.JSONDecodeError as e:
            log_aws_service_call(logger, 'lambda', 'invoke', False, duration_ms, error=e, extra=extra)
            raise LambdaInvocationError(f"Invalid JSON in Lambda response: {e}") from e

        function_error = response.get('FunctionError')
        if function_error:
            error_message = result['payload'].get('errorMessage', 'Unknown error')
            log_aws_service_call(
                logger, 'lambda', 'invoke', False, duration_ms,
                extra={**extra, 'function_error': function_error, 'error_message': error_message}
            )
            raise LambdaInvocationError(
                f"Lambda function error ({function_error}): {error_message}"
            )

    log_aws_service_call(
        logger, 'lambda', 'invoke', True, duration_ms,
        extra={**extra, 'status_code': status_code}
    )
    return result


def invoke_lambda_async(function_arn: Optional[str], payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fire-and-forget invocation.

    Example:
        >>> invoke_lambda_async(
        ...     'arn:aws:lambda:ap-south-1:123456789012:function:aarogya-emergency-alert',
        ...     {'sender_id': '+919800000000', 'symptom': 'bleeding'}
        ... )
    """
    return invoke_lambda(function_arn, payload, invocation_type='Event')
