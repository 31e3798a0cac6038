"""Dependency container wiring for the ingest."""

from dataclasses import dataclass

from supabase import create_client

from fndds_ingest.adapters.supabase_food_store import SupabaseFoodStore
from fndds_ingest.config import Settings
from fndds_ingest.services.dictionaries import DictionaryService
from fndds_ingest.services.ingest import ExtractFiles, IngestService
from fndds_ingest.services.store import FoodStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: FoodStore
    dictionary_service: DictionaryService
    ingest_service: IngestService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    store = SupabaseFoodStore(
        supabase_client,
        foods_table=resolved_settings.foods_table,
        dictionaries_table=resolved_settings.dictionaries_table,
    )
    return build_ingest_container(resolved_settings, store)


def build_ingest_container(settings: Settings, store: FoodStore) -> AppContainer:
    """Wire the ingest services around an existing store."""
    dictionary_service = DictionaryService(
        store=store,
        namespace=settings.dictionary_namespace,
        page_size=settings.dictionary_page_size,
    )
    ingest_service = IngestService(
        store=store,
        dictionaries=dictionary_service,
        source_tag=settings.source_tag,
        files=ExtractFiles(
            foods=settings.foods_file,
            servings=settings.servings_file,
            nutrients=settings.nutrients_file,
            input_foods=settings.input_foods_file,
        ),
        delimiter=settings.csv_delimiter,
        skip_header=settings.skip_header,
        serialize_flushes=settings.serialize_flushes,
        progress_interval=settings.progress_interval,
    )
    return AppContainer(
        settings=settings,
        store=store,
        dictionary_service=dictionary_service,
        ingest_service=ingest_service,
    )
