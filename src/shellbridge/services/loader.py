"""Configuration loader: fetch a kubeconfig through the bridge and normalize it.

Normalization renames the kebab-case keys the UI consumes in camelCase and
drops user entries that carry no credential record.  Any other entry that
does not fit the document model is dropped on its own; only a result that
is not a mapping at all is an error.  The raw payload is deep-copied, so
no caller-visible object is ever mutated.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from shellbridge.domain.errors import InvalidFormat
from shellbridge.domain.kubeconfig import (
    ConfigurationDocument,
    NamedCluster,
    NamedContext,
    NamedUser,
)
from shellbridge.services.bridge import ExecutionBridge

logger = logging.getLogger(__name__)

DEFAULT_KUBECONFIG_PATH = "~/.kube/config"
LOAD_COMMAND = "load_kubeconfig"

_USER_KEY_RENAMES = {
    "client-certificate": "clientCertificate",
    "client-key": "clientKey",
}

_SECTION_MODELS: dict[str, type[BaseModel]] = {
    "clusters": NamedCluster,
    "contexts": NamedContext,
    "users": NamedUser,
}
_SCALAR_KEYS = ("apiVersion", "kind", "currentContext")


def _rename(mapping: dict[str, Any], old: str, new: str) -> None:
    if old in mapping:
        mapping[new] = mapping.pop(old)


def normalize_kubeconfig(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a normalized copy of a raw kubeconfig mapping.

    * ``current-context`` becomes ``currentContext``.
    * User entries whose ``user`` is absent, null or not a mapping are dropped.
    * In the remaining users, ``client-certificate`` and ``client-key`` become
      ``clientCertificate`` and ``clientKey``.
    """
    doc = copy.deepcopy(dict(raw))
    doc["currentContext"] = doc.pop("current-context", None)

    users: list[Any] = []
    for entry in _entries(doc.get("users")):
        if not isinstance(entry, Mapping) or not isinstance(entry.get("user"), Mapping):
            logger.debug("Dropping user entry without credentials: %r", _entry_name(entry))
            continue
        credentials = dict(entry["user"])
        for old, new in _USER_KEY_RENAMES.items():
            _rename(credentials, old, new)
        users.append({**entry, "user": credentials})
    doc["users"] = users
    return doc


def _entry_name(entry: Any) -> Any:
    return entry.get("name") if isinstance(entry, Mapping) else None


def _entries(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _valid_entries(section: str, model: type[BaseModel], entries: list[Any]) -> list[BaseModel]:
    kept: list[BaseModel] = []
    for entry in entries:
        try:
            kept.append(model.model_validate(entry))
        except ValidationError as exc:
            logger.debug(
                "Dropping %s entry %r: %d validation error(s)",
                section,
                _entry_name(entry),
                exc.error_count(),
            )
    return kept


def build_document(normalized: Mapping[str, Any]) -> ConfigurationDocument:
    """Build a document from a normalized mapping, one entry at a time.

    Entries that do not validate are dropped individually, and top-level
    fields of the wrong type fall back to their empty value, so a partial
    kubeconfig still yields every usable entry.
    """
    doc = dict(normalized)
    for section, model in _SECTION_MODELS.items():
        doc[section] = _valid_entries(section, model, _entries(doc.get(section)))
    for key in _SCALAR_KEYS:
        if not isinstance(doc.get(key), str):
            doc[key] = None
    if not isinstance(doc.get("preferences"), Mapping):
        doc["preferences"] = {}
    return ConfigurationDocument.model_validate(doc)


class ConfigurationLoader:
    """Loads a fresh :class:`ConfigurationDocument` on every call."""

    def __init__(self, bridge: ExecutionBridge) -> None:
        self._bridge = bridge

    async def load(self, path: str | None = DEFAULT_KUBECONFIG_PATH) -> ConfigurationDocument:
        """Fetch and normalize the document at *path*.

        Raises:
            InvalidFormat: the host result is not a mapping.
            MissingArgument, HostFailure: propagated from the bridge.
        """
        raw = await self._bridge.invoke(LOAD_COMMAND, {"path": path or DEFAULT_KUBECONFIG_PATH})
        if not isinstance(raw, Mapping):
            raise InvalidFormat(raw=raw)
        return build_document(normalize_kubeconfig(raw))
