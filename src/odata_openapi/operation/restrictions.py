"""Resolve capability restriction records across annotation scopes.

A record found at a more specific scope wins field by field; broader scopes
only fill the fields the specific record leaves as ``None``.
"""

import logging
from typing import TypeVar

from odata_openapi.context import ODataContext
from odata_openapi.edm.model import NavigationProperty
from odata_openapi.edm.segments import NavigationSourceSegment, ODataPath
from odata_openapi.vocabulary.capabilities import (
    NavigationPropertyRestriction,
    NavigationRestrictions,
    ReadByKeyRestrictions,
    ReadRestrictions,
    ReadRestrictionsBase,
    Record,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

_NAVIGATION_FIELDS = {
    "ReadRestrictions": "read_restrictions",
    "InsertRestrictions": "insert_restrictions",
    "UpdateRestrictions": "update_restrictions",
    "DeleteRestrictions": "delete_restrictions",
}


def merge_properties_if_null(specific: R | None, broader: R | None) -> R | None:
    """Return a copy of specific with its unset fields taken from broader."""
    if specific is None:
        return broader
    if broader is None:
        return specific

    updates = {}
    for name in type(specific).model_fields:
        if getattr(specific, name) is None:
            value = getattr(broader, name, None)
            if value is not None:
                updates[name] = value
    if updates:
        logger.debug("Merged %s fields from broader scope: %s", type(specific).__name__, sorted(updates))
    return specific.model_copy(update=updates)


def resolve_restriction(context: ODataContext, record_type: type[R], *targets) -> R | None:
    """Merge the record of record_type found at each target, most specific first."""
    result = None
    for target in targets:
        if target is None:
            continue
        result = merge_properties_if_null(result, context.annotations.get_record(target, record_type))
    return result


def apply_read_by_key(read: ReadRestrictions | None) -> ReadRestrictionsBase | None:
    """Narrow read restrictions to a by-key read.

    A nested ``ReadByKeyRestrictions`` wins; the enclosing record fills
    whatever the nested one leaves unset.
    """
    if read is None or read.read_by_key_restrictions is None:
        return read
    parent = ReadByKeyRestrictions(
        **{name: getattr(read, name) for name in ReadByKeyRestrictions.model_fields}
    )
    return merge_properties_if_null(read.read_by_key_restrictions, parent)


def find_navigation_restriction(
    context: ODataContext, path: ODataPath, navigation_property: NavigationProperty
) -> NavigationPropertyRestriction | None:
    """The RestrictedProperties entry that governs the navigation in path.

    The navigation source's entry for this navigation path wins; otherwise
    the first entry annotated on the navigation property itself.
    """
    first = path.first_segment
    if isinstance(first, NavigationSourceSegment):
        nav_path = path.navigation_property_path()
        restrictions = context.annotations.get_record(first.navigation_source, NavigationRestrictions)
        if restrictions and restrictions.restricted_properties:
            for entry in restrictions.restricted_properties:
                if entry.navigation_property == nav_path:
                    return entry

    own = context.annotations.get_record(navigation_property, NavigationRestrictions)
    if own and own.restricted_properties:
        return own.restricted_properties[0]
    return None


def resolve_navigation_restriction(
    context: ODataContext,
    path: ODataPath,
    navigation_property: NavigationProperty,
    record_type: type[R],
) -> R | None:
    """Target path record, then the navigation restriction, then the navigation property."""
    target_path = path.target_path(context.container_target)
    result = context.annotations.get_record(target_path, record_type)

    entry = find_navigation_restriction(context, path, navigation_property)
    field = _NAVIGATION_FIELDS.get(record_type.__name__)
    if entry is not None and field is not None:
        result = merge_properties_if_null(result, getattr(entry, field))

    return merge_properties_if_null(
        result, context.annotations.get_record(navigation_property, record_type)
    )
