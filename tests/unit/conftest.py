"""Unit test fixtures — settings rooted in tmp_path, templates, fakes."""

from __future__ import annotations

import pytest

from fakes import IDENTITY, MemoryBindingStore
from fakes.templates import HTM_TEMPLATE, RTF_TEMPLATE, TXT_TEMPLATE
from sigdeploy.core.config import AppSettings, MailClientConfig, SignatureConfig
from sigdeploy.local.inspector import LocalStateInspector
from sigdeploy.models.signature import OutputFormat, TemplateSet
from sigdeploy.reconciler import SignatureReconciler


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        local_identity=IDENTITY,
        signature=SignatureConfig(
            prefix="Acme",
            fallback_country="Slovakia",
            signatures_dir=tmp_path / "Signatures",
            templates_dir=tmp_path / "templates",
        ),
        mail=MailClientConfig(backend="memory", profile="Outlook"),
    )


@pytest.fixture
def templates():
    return TemplateSet(
        templates={
            OutputFormat.HTM: HTM_TEMPLATE,
            OutputFormat.RTF: RTF_TEMPLATE,
            OutputFormat.TXT: TXT_TEMPLATE,
        },
        resources={"logo.png": b"\x89PNG\r\n\x1a\nlogo"},
    )


@pytest.fixture
def bindings():
    store = MemoryBindingStore(profile="Outlook")
    store.add_account(IDENTITY)
    return store


@pytest.fixture
def inspector(settings, bindings):
    return LocalStateInspector(settings, bindings)


@pytest.fixture
def reconciler(settings, inspector, bindings):
    return SignatureReconciler(settings=settings, inspector=inspector, binding_store=bindings)
