"""
Variant inheritance for catalog instruments.

A variant stores only what differs from its base model. The effective
record shown to users is computed on demand by merging the variant over
its parent, and over the parent's own parent when variants are nested.
"""

from typing import Any, Dict, List, Optional

import structlog
from django.conf import settings

from apps.catalog.models import Instrument

logger = structlog.get_logger(__name__)

# Fields with their own merge rule; everything else is a plain override
MERGED_FIELDS = ('id', 'description', 'websites', 'specs', 'generic_images')


def _is_empty(value: Any) -> bool:
    return value is None or value == '' or value == [] or value == {}


def _as_record(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _website_key(website: Dict[str, Any]) -> Optional[str]:
    url = website.get('url')
    return url if isinstance(url, str) else None


def _spec_key(spec: Dict[str, Any]) -> Optional[str]:
    category = spec.get('category') or ''
    label = spec.get('label') or ''
    if not isinstance(category, str) or not isinstance(label, str):
        return None
    return f'{category}:{label}'


def _merge_keyed(parent_items, child_items, key) -> List[Dict[str, Any]]:
    """Parent entries first, child entries win on the same key.

    Entries without a usable string key are dropped.
    """
    merged = {}
    for item in _as_list(parent_items) + _as_list(child_items):
        if not isinstance(item, dict):
            continue
        item_key = key(item)
        if item_key is not None:
            merged[item_key] = dict(item)
    return list(merged.values())


def merge_instruments(child: Optional[Dict[str, Any]],
                      parent: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge a variant record over its parent record.

    Neither input is modified. Missing or malformed inputs count as empty,
    so this never raises.

    Rules:
        - plain fields: the child's value wins unless it is empty
          (None, '', [] or {}); False and 0 are kept
        - description: the child's text wins only if it is not blank
        - websites: merged by url, parent order first; entries without
          a string url are dropped
        - specs: merged by category + label, parent order first
        - generic_images: the child's images, then the parent's images
          that are neither excluded by the child nor already listed
        - id: the child's id, else the parent's

    Args:
        child: Variant record (see ``Instrument.to_record``)
        parent: Parent record

    Returns:
        New effective record
    """
    child = _as_record(child)
    parent = _as_record(parent)

    result = dict(parent)
    for key, value in child.items():
        if key in MERGED_FIELDS:
            continue
        if not _is_empty(value) or key not in result:
            result[key] = value

    child_description = child.get('description')
    if isinstance(child_description, str) and child_description.strip():
        result['description'] = child_description
    else:
        result['description'] = parent.get('description')

    result['websites'] = _merge_keyed(
        parent.get('websites'), child.get('websites'), key=_website_key
    )
    result['specs'] = _merge_keyed(parent.get('specs'), child.get('specs'), key=_spec_key)

    child_images = list(_as_list(child.get('generic_images')))
    excluded = set(
        img for img in _as_list(child.get('excluded_images')) if isinstance(img, str)
    )
    seen = set(img for img in child_images if isinstance(img, str))
    images = child_images
    for img in _as_list(parent.get('generic_images')):
        if not isinstance(img, str) or img in excluded or img in seen:
            continue
        seen.add(img)
        images.append(img)
    result['generic_images'] = images

    result['id'] = child['id'] if child.get('id') is not None else parent.get('id')
    return result


def _summary(instrument: Instrument) -> Dict[str, Any]:
    return {
        'id': instrument.pk,
        'brand': instrument.brand,
        'model': instrument.model,
        'variant_label': instrument.variant_label,
    }


class InstrumentInheritanceService:
    """
    Resolves effective instrument records along the parent chain.
    """

    @staticmethod
    def get_ancestors(instrument: Instrument, max_depth: Optional[int] = None) -> List[Instrument]:
        """
        Walk parent links upward, nearest parent first.

        The walk stops at a missing parent, a link back to the starting
        record, a parent already visited, or after ``max_depth`` steps.

        Args:
            instrument: Starting record
            max_depth: Defaults to INSTRUMENT_INHERITANCE_MAX_DEPTH

        Returns:
            List of ancestor instruments
        """
        if max_depth is None:
            max_depth = settings.INSTRUMENT_INHERITANCE_MAX_DEPTH

        ancestors = []
        visited = {instrument.pk}
        parent_id = instrument.parent_id

        while parent_id is not None:
            if parent_id in visited:
                logger.warning(
                    'instrument_inheritance_cycle',
                    instrument_id=instrument.pk,
                    parent_id=parent_id,
                )
                break
            if len(ancestors) >= max_depth:
                logger.warning(
                    'instrument_inheritance_depth_exceeded',
                    instrument_id=instrument.pk,
                    max_depth=max_depth,
                )
                break

            parent = Instrument.objects.filter(pk=parent_id).first()
            if parent is None:
                break

            ancestors.append(parent)
            visited.add(parent.pk)
            parent_id = parent.parent_id

        return ancestors

    @staticmethod
    def resolve(instrument: Instrument, variants=None, max_depth: Optional[int] = None) -> Dict[str, Any]:
        """
        Build the effective record of an instrument.

        Args:
            instrument: Record to resolve
            variants: Optional queryset of direct children to list;
                defaults to every child of the instrument
            max_depth: Maximum number of ancestors merged

        Returns:
            Effective record with ``_hierarchy`` (ancestors, nearest first)
            and ``_variants`` (direct children)
        """
        effective = instrument.to_record()
        ancestors = InstrumentInheritanceService.get_ancestors(instrument, max_depth)

        for parent in ancestors:
            effective = merge_instruments(effective, parent.to_record())

        if variants is None:
            variants = instrument.variants.all()

        effective['_hierarchy'] = [_summary(parent) for parent in ancestors]
        effective['_variants'] = [
            dict(_summary(variant), generic_images=list(variant.generic_images or []))
            for variant in variants.order_by('variant_label', 'pk')
        ]
        return effective


def resolve_effective_instrument(instrument: Instrument, variants=None) -> Dict[str, Any]:
    return InstrumentInheritanceService.resolve(instrument, variants=variants)
