"""Decoded form of the Lando environment description (``.lando.yml``)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class EnvironmentDescription(BaseModel):
    """The parts of ``.lando.yml`` that URI resolution looks at.

    ``proxy_domains`` mirrors ``proxy.appserver``; ``uri_override`` mirrors
    ``services.appserver.overrides.environment.DRUSH_OPTIONS_URI``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    proxy_domains: list[str] | None = None
    uri_override: str | None = None

    @field_validator("proxy_domains", mode="before")
    @classmethod
    def _domains_are_strings(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, list):
            raise ValueError("proxy.appserver must be a list of domains")
        for domain in value:
            if not isinstance(domain, str):
                raise ValueError(f"proxy.appserver entries must be domain names, got {domain!r}")
        return value

    @classmethod
    def from_document(cls, document: Any) -> EnvironmentDescription:
        """Pick the relevant keys out of a decoded YAML mapping."""
        if not isinstance(document, dict):
            raise ValueError("environment description must be a YAML mapping")

        proxy = document.get("proxy") or {}
        domains = proxy.get("appserver") if isinstance(proxy, dict) else None

        override = _dig(
            document,
            "services",
            "appserver",
            "overrides",
            "environment",
            "DRUSH_OPTIONS_URI",
        )

        return cls(
            name=document.get("name"),
            proxy_domains=domains,
            uri_override=str(override) if override else None,
        )


def _dig(document: dict[str, Any], *keys: str) -> Any:
    node: Any = document
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node
