"""Signature renderer — fills templates from a roster record.

Pure function of (record, templates, artifact name, encodings): no file or
network access happens here.
"""

from __future__ import annotations

import re
from typing import Mapping

from sigdeploy.local.naming import ArtifactName
from sigdeploy.models.roster import RosterRecord
from sigdeploy.models.signature import OutputFormat, RenderedSignature, TemplateSet

PLACEHOLDER = re.compile(r"%(?P<name>[A-Za-z_][A-Za-z0-9_]*)%")
SOURCE_FILES_DIR = "source_files_dir"

DEFAULT_ENCODINGS: dict[str, str] = {"htm": "utf-8", "rtf": "cp1252", "txt": "utf-8"}

# Central-European diacritics (Slovak, Czech, Hungarian, Polish, German),
# both cases, escaped as RTF unicode control words with a "?" fallback.
_CE_DIACRITICS = (
    "áäčďéěíĺľňóôöőŕřšťúůüűýžąćęłńśźż"
    "ÁÄČĎÉĚÍĹĽŇÓÔÖŐŔŘŠŤÚŮÜŰÝŽĄĆĘŁŃŚŹŻ"
)
RTF_ESCAPES: dict[str, str] = {ch: f"\\u{ord(ch)}?" for ch in _CE_DIACRITICS}


def substitute(template: str, values: Mapping[str, str]) -> str:
    """Replace known ``%name%`` placeholders; unknown ones stay verbatim."""

    def _replace(match: re.Match[str]) -> str:
        return values.get(match.group("name"), match.group(0))

    return PLACEHOLDER.sub(_replace, template)


def _rtf_unicode(ch: str) -> str:
    code = ord(ch)
    if code > 0xFFFF:
        # \u takes a signed 16-bit value; astral chars become a surrogate pair
        code -= 0x10000
        return _rtf_unicode(chr(0xD800 + (code >> 10))) + _rtf_unicode(chr(0xDC00 + (code & 0x3FF)))
    if code > 0x7FFF:
        code -= 0x10000
    return f"\\u{code}?"


def escape_legacy(text: str, encoding: str = "cp1252") -> str:
    """Escape table diacritics and anything ``encoding`` cannot represent."""
    out = []
    for ch in text:
        escaped = RTF_ESCAPES.get(ch)
        if escaped is None:
            try:
                ch.encode(encoding)
            except UnicodeEncodeError:
                escaped = _rtf_unicode(ch)
        out.append(escaped or ch)
    return "".join(out)


def encode_content(text: str, fmt: OutputFormat, encoding: str) -> bytes:
    if fmt.legacy_encoding:
        return escape_legacy(text, encoding).encode(encoding)
    return text.encode(encoding)


def render_signature(
    record: RosterRecord,
    templates: TemplateSet,
    artifact: ArtifactName,
    encodings: Mapping[str, str] | None = None,
) -> RenderedSignature:
    """Render every template in ``templates`` for one identity and version."""
    encodings = encodings or DEFAULT_ENCODINGS
    values = record.placeholders()
    values[SOURCE_FILES_DIR] = artifact.files_dir_name

    content: dict[OutputFormat, bytes] = {}
    for fmt in sorted(templates.templates, key=lambda f: f.value):
        text = substitute(templates.templates[fmt], values)
        content[fmt] = encode_content(text, fmt, encodings.get(fmt.value, "utf-8"))

    return RenderedSignature(
        base_name=artifact.base_name,
        files_dir_name=artifact.files_dir_name,
        content=content,
        resources=dict(templates.resources),
    )
