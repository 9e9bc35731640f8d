"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from protofilter.app import GeneratorService
from protofilter.app.adapters import DescriptorSchemaAdapter, FileSystemStorageAdapter
from protofilter.app.ports import StoragePort
from protofilter.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    storage_port: StoragePort
    generator_service: GeneratorService


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Instantiate adapters and services for CLI consumption."""

    active_settings = settings or get_settings()

    storage = FileSystemStorageAdapter()
    generator_service = GeneratorService(
        schema_reader_factory=DescriptorSchemaAdapter,
        storage_port=storage,
        settings=active_settings,
    )

    return ApplicationContainer(
        settings=active_settings,
        storage_port=storage,
        generator_service=generator_service,
    )
