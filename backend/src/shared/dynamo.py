"""
DynamoDB utility functions shared by the review store.

Failures are raised as StoreError instead of being swallowed, and failed
conditional writes surface as ConditionalCheckFailed so callers can turn
them into domain outcomes (duplicate review, already decided submission).
"""
import boto3
from typing import List, Dict, Any, Optional
from botocore.exceptions import BotoCoreError, ClientError
from .config import config
from .errors import StoreError
from .logging import logger

dynamodb = boto3.resource('dynamodb', region_name=config.AWS_REGION)


class ConditionalCheckFailed(Exception):
    """A conditional put/update did not apply because its condition was false."""
    pass


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


def put_item(
    table_name: str,
    item: Dict[str, Any],
    condition_expression: Optional[str] = None,
    expression_names: Optional[Dict[str, str]] = None
) -> None:
    """
    Put a single item, optionally guarded by a condition expression.

    Raises:
        ConditionalCheckFailed: the condition was false, nothing was written
        StoreError: any other DynamoDB failure
    """
    try:
        table = dynamodb.Table(table_name)

        params = {'Item': item}
        if condition_expression:
            params['ConditionExpression'] = condition_expression
        if expression_names:
            params['ExpressionAttributeNames'] = expression_names

        table.put_item(**params)

    except ClientError as e:
        if _is_conditional_failure(e):
            raise ConditionalCheckFailed(str(e)) from e
        logger.error(f"Error putting item into {table_name}: {e}")
        raise StoreError() from e
    except BotoCoreError as e:
        logger.error(f"Error putting item into {table_name}: {e}")
        raise StoreError() from e


def query(
    table_name: str,
    index_name: Optional[str] = None,
    key_condition: Optional[Any] = None,
    filter_expression: Optional[Any] = None,
    limit: Optional[int] = None,
    scan_forward: bool = True,
    consistent_read: bool = False
) -> List[Dict[str, Any]]:
    """
    Query DynamoDB table or index, following LastEvaluatedKey pages.

    Args:
        table_name: Name of the DynamoDB table
        index_name: Optional GSI name
        key_condition: Key condition expression
        filter_expression: Optional filter expression
        limit: Max items to return
        scan_forward: True for ascending, False for descending
        consistent_read: Strongly consistent read (base table only)

    Returns:
        List of items matching the query
    """
    try:
        table = dynamodb.Table(table_name)

        query_params = {
            'ScanIndexForward': scan_forward
        }

        if index_name:
            query_params['IndexName'] = index_name
        if key_condition is not None:
            query_params['KeyConditionExpression'] = key_condition
        if filter_expression is not None:
            query_params['FilterExpression'] = filter_expression
        if limit:
            query_params['Limit'] = limit
        if consistent_read and not index_name:
            query_params['ConsistentRead'] = True

        items = []
        while True:
            response = table.query(**query_params)
            items.extend(response.get('Items', []))

            last_key = response.get('LastEvaluatedKey')
            if not last_key or (limit and len(items) >= limit):
                break
            query_params['ExclusiveStartKey'] = last_key

        return items[:limit] if limit else items

    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error querying {table_name}: {e}")
        raise StoreError() from e


def get_item(
    table_name: str,
    key: Dict[str, Any],
    consistent_read: bool = False
) -> Optional[Dict[str, Any]]:
    """Get a single item from DynamoDB."""
    try:
        table = dynamodb.Table(table_name)
        params = {'Key': key}
        if consistent_read:
            params['ConsistentRead'] = True
        response = table.get_item(**params)
        return response.get('Item')
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error getting item from {table_name}: {e}")
        raise StoreError() from e


def update_item(
    table_name: str,
    key: Dict[str, Any],
    update_expression: str,
    expression_values: Dict[str, Any],
    expression_names: Optional[Dict[str, str]] = None,
    condition_expression: Optional[str] = None,
    return_values: Optional[str] = None
) -> Dict[str, Any]:
    """
    Update an item in DynamoDB.

    Returns:
        The 'Attributes' of the response (empty unless return_values is set)

    Raises:
        ConditionalCheckFailed: the condition was false, nothing was written
        StoreError: any other DynamoDB failure
    """
    try:
        table = dynamodb.Table(table_name)

        params = {
            'Key': key,
            'UpdateExpression': update_expression,
            'ExpressionAttributeValues': expression_values
        }

        if expression_names:
            params['ExpressionAttributeNames'] = expression_names
        if condition_expression:
            params['ConditionExpression'] = condition_expression
        if return_values:
            params['ReturnValues'] = return_values

        response = table.update_item(**params)
        return response.get('Attributes', {})

    except ClientError as e:
        if _is_conditional_failure(e):
            raise ConditionalCheckFailed(str(e)) from e
        logger.error(f"Error updating item in {table_name}: {e}")
        raise StoreError() from e
    except BotoCoreError as e:
        logger.error(f"Error updating item in {table_name}: {e}")
        raise StoreError() from e
