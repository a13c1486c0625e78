from .collection import CollectionService
from .showrooms import ShowroomService, generate_slug, slug_base
from .export import build_csv, build_pdf, get_export_items

__all__ = [
    'CollectionService',
    'ShowroomService',
    'generate_slug',
    'slug_base',
    'build_csv',
    'build_pdf',
    'get_export_items',
]
