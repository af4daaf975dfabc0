"""
Bar submission intake: validation, slug generation and duplicate detection.
"""
import re
from typing import Any, Dict, List

from .errors import ConflictError, ValidationError
from .logging import logger
from .models import (
    AGE_GROUPS, AMENITY_FLAGS, CAPACITY_SIZES, COVER_AMOUNTS, COVER_FREQUENCIES,
    DAYS_OF_WEEK, LINEUP_TIMES, MUSIC_GENRES, SubmissionStatus,
)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000

# request field -> (stored attribute, allowed values)
CHOICE_FIELDS = {
    'typical_lineup': ('typicalLineup', LINEUP_TIMES),
    'cover_frequency': ('coverFrequency', COVER_FREQUENCIES),
    'cover_amount': ('coverAmount', COVER_AMOUNTS),
    'age_group': ('ageGroup', AGE_GROUPS),
    'capacity_size': ('capacitySize', CAPACITY_SIZES),
}

MULTI_CHOICE_FIELDS = {
    'top_music': ('topMusic', MUSIC_GENRES),
    'longest_line_days': ('longestLineDays', DAYS_OF_WEEK),
    'live_music_days': ('liveMusicDays', DAYS_OF_WEEK),
    'karaoke_nights': ('karaokeNights', DAYS_OF_WEEK),
}

TEXT_FIELDS = {
    'address': 'address',
    'description': 'description',
    'typical_vibe': 'typicalVibe',
}


def generate_slug(name: str) -> str:
    """URL-friendly slug: 'The Bar & Grill!' -> 'the-bar-grill'."""
    slug = name.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)  # Remove special characters
    slug = re.sub(r'\s+', '-', slug)          # Spaces to hyphens
    slug = re.sub(r'-+', '-', slug)           # Collapse hyphens
    return slug.strip('-')


def _camel(field: str) -> str:
    head, *rest = field.split('_')
    return head + ''.join(part.title() for part in rest)


def validate_submission_input(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a bar submission form.

    Returns:
        Dict of stored attributes (camelCase) for the submission

    Raises:
        ValidationError: listing every invalid field
    """
    errors = []
    item = {}

    for field in ('name', 'neighbourhood'):
        value = body.get(field)
        if not isinstance(value, str) or not value.strip():
            errors.append({'field': field, 'message': f'{field} is required'})
        elif len(value) > NAME_MAX_LENGTH:
            errors.append({'field': field, 'message': f'{field} must be at most {NAME_MAX_LENGTH} characters'})
        else:
            item[field] = value.strip()

    for field, attribute in TEXT_FIELDS.items():
        value = body.get(field)
        if value is None:
            continue
        if not isinstance(value, str) or len(value) > DESCRIPTION_MAX_LENGTH:
            errors.append({'field': field, 'message': f'{field} must be a string of at most {DESCRIPTION_MAX_LENGTH} characters'})
        elif value.strip():
            item[attribute] = value.strip()

    for field, (attribute, choices) in CHOICE_FIELDS.items():
        value = body.get(field)
        if value is None:
            continue
        if value not in choices:
            errors.append({'field': field, 'message': f"{field} must be one of {', '.join(choices)}"})
        else:
            item[attribute] = value

    for field, (attribute, choices) in MULTI_CHOICE_FIELDS.items():
        value = body.get(field, [])
        if not isinstance(value, list) or any(v not in choices for v in value):
            errors.append({'field': field, 'message': f"{field} must be a list drawn from {', '.join(choices)}"})
        else:
            item[attribute] = list(dict.fromkeys(value))

    for field in AMENITY_FLAGS:
        value = body.get(field, False)
        if not isinstance(value, bool):
            errors.append({'field': field, 'message': f'{field} must be a boolean'})
        else:
            item[_camel(field)] = value

    if errors:
        raise ValidationError('Invalid bar submission', details=errors)

    return item


def is_duplicate(name: str, neighbourhood: str, existing: Dict[str, Any]) -> bool:
    """
    Same neighbourhood, and the names are equal or one contains the other.
    """
    normalized_name = name.lower().strip()
    normalized_neighbourhood = neighbourhood.lower().strip()
    item_name = (existing.get('name') or '').lower().strip()
    item_neighbourhood = (existing.get('neighbourhood') or '').lower().strip()

    if not item_name or item_neighbourhood != normalized_neighbourhood:
        return False

    return item_name in normalized_name or normalized_name in item_name


def check_for_duplicates(store, name: str, neighbourhood: str) -> Dict[str, List[Dict[str, Any]]]:
    """
    Find published bars and open submissions that look like the same venue.

    Returns:
        Dict with 'existing_bars' and 'pending_submissions' matches
    """
    bars = store.find_similar_bars(neighbourhood)
    submissions = store.find_similar_submissions(neighbourhood)

    return {
        'existing_bars': [b for b in bars if is_duplicate(name, neighbourhood, b)],
        'pending_submissions': [s for s in submissions if is_duplicate(name, neighbourhood, s)]
    }


def create_submission(store, user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate, de-duplicate and store a new pending bar submission.

    Raises:
        ValidationError: invalid form
        ConflictError: a similar bar or submission already exists
    """
    item = validate_submission_input(body)

    duplicates = check_for_duplicates(store, item['name'], item['neighbourhood'])
    if duplicates['existing_bars'] or duplicates['pending_submissions']:
        logger.info(f"Duplicate submission rejected: {item['name']} in {item['neighbourhood']}")
        raise ConflictError(
            f"A bar similar to \"{item['name']}\" already exists in {item['neighbourhood']}. "
            f"Please check existing bars before submitting.",
            error='Duplicate detected',
            details={
                'existing_bars': [
                    {'id': b.get('barId'), 'name': b.get('name'), 'neighbourhood': b.get('neighbourhood')}
                    for b in duplicates['existing_bars']
                ],
                'pending_submissions': [
                    {'id': s.get('submissionId'), 'name': s.get('name'), 'neighbourhood': s.get('neighbourhood')}
                    for s in duplicates['pending_submissions']
                ]
            }
        )

    item.update({
        'userId': user_id,
        'slug': generate_slug(item['name']),
        'status': SubmissionStatus.PENDING
    })
    return store.insert_submission(item)
