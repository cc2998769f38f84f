"""Pluggable mail-client binding stores behind the IBindingStore protocol."""

from __future__ import annotations

from sigdeploy.bindings.json_backend import JsonBindingStore
from sigdeploy.bindings.memory_backend import MemoryBindingStore
from sigdeploy.bindings.registry_backend import RegistryBindingStore
from sigdeploy.core.config import AppSettings
from sigdeploy.core.protocols import IBindingStore


def create_binding_store(settings: AppSettings | None = None) -> IBindingStore:
    """Create the binding store selected by ``settings.mail.backend``.

    Raises:
        BindingUnavailable: the registry backend was chosen off Windows or
            without an Outlook profile.
    """
    if settings is None:
        settings = AppSettings()

    mail = settings.mail
    if mail.backend == "json":
        return JsonBindingStore(path=mail.store_path, profile=mail.profile or "Outlook")
    if mail.backend == "memory":
        return MemoryBindingStore(profile=mail.profile or "Outlook")
    return RegistryBindingStore(office_version=mail.office_version, profile=mail.profile)
