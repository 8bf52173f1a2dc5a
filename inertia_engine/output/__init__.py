"""Page metadata and page object assembly."""

from inertia_engine.output.metadata_builder import MetadataBuilder
from inertia_engine.output.page_builder import PageObjectBuilder, build_page_object, build_url

__all__ = ['MetadataBuilder', 'PageObjectBuilder', 'build_page_object', 'build_url']
