"""Service addresses chosen from the plugin's environment settings."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PluginSettings",
    "futureverse_create_futurepass_url",
    "futureverse_helper_service_url",
    "futurepass_chain_id",
    "futurepass_api_url",
    "futureverse_signer_url",
    "futureverse_auth_url",
    "inventory_service_host",
    "avatar_service_host",
    "inventory_service_api_url",
    "avatar_service_api_url",
]

PRODUCTION = "Production"
_STAGING_SERVICE_HOST = "dysaw5zhak.us-east-1.awsapprunner.com"
_PRODUCTION_INVENTORY_HOST = "7vz9y7rdpy.us-east-1.awsapprunner.com"


@dataclass
class PluginSettings:
    """Environment settings of the plugin.

    A setting left as ``None`` was not configured and takes the default the
    build type gives it. ``shipping`` marks a shipping build.
    """

    shipping: bool = False
    futureverse_shipping_environment: str | None = None
    futureverse_development_environment: str | None = None
    development_environment: str | None = None
    shipping_environment: str | None = None
    enable_development_environment: bool = False

    def futureverse_environment(self) -> str:
        """Name of the Futureverse environment in use for this build."""
        configured = (
            self.futureverse_shipping_environment
            if self.shipping
            else self.futureverse_development_environment
        )
        return PRODUCTION if configured is None else configured

    def _service_environment(self) -> str:
        if self.shipping:
            configured, default = self.development_environment, PRODUCTION
        else:
            configured, default = self.shipping_environment, "Staging"
        return default if configured is None else configured


def _settings(settings: PluginSettings | None) -> PluginSettings:
    return PluginSettings() if settings is None else settings


def _is_production(settings: PluginSettings | None) -> bool:
    return _settings(settings).futureverse_environment() == PRODUCTION


def futureverse_create_futurepass_url(settings: PluginSettings | None = None) -> str:
    """Page where a user creates a futurepass."""
    if _is_production(settings):
        return "https://futurepass.futureverse.app/"
    return "https://identity-dashboard.futureverse.cloud/"


def futureverse_helper_service_url() -> str:
    """Service that helps send custodial transactions."""
    return "https://fvhelperservice.openmeta.xyz/"


def futurepass_chain_id(settings: PluginSettings | None = None) -> str:
    """Chain id used with futurepasses."""
    if _is_production(settings):
        return "1"
    return "11155111"


def futurepass_api_url(settings: PluginSettings | None = None) -> str:
    """Base URL of the futurepass API."""
    if _is_production(settings):
        return "https://account-indexer.pass.online/api/v1"
    return "https://account-indexer.passonline.dev/api/v1"


def futureverse_signer_url(settings: PluginSettings | None = None) -> str:
    """URL of the Futureverse signer."""
    if _is_production(settings):
        return "https://signer.pass.online"
    return "https://signer.passonline.cloud"


def futureverse_auth_url(settings: PluginSettings | None = None) -> str:
    """URL of the Futureverse login service."""
    if _is_production(settings):
        return "https://login.pass.online"
    return "https://login.passonline.cloud"


def inventory_service_host(settings: PluginSettings | None = None) -> str:
    """Host name of the inventory service."""
    settings = _settings(settings)
    if settings.enable_development_environment:
        return _STAGING_SERVICE_HOST
    if settings._service_environment() == PRODUCTION:
        return _PRODUCTION_INVENTORY_HOST
    return _STAGING_SERVICE_HOST


def avatar_service_host(settings: PluginSettings | None = None) -> str:
    """Host name of the avatar service; only staging is deployed."""
    _settings(settings)
    return _STAGING_SERVICE_HOST


def inventory_service_api_url(settings: PluginSettings | None = None) -> str:
    """Base URL of the inventory service API."""
    return "https://" + inventory_service_host(settings) + "/InventoryService/"


def avatar_service_api_url(settings: PluginSettings | None = None) -> str:
    """Base URL of the avatar service API."""
    return "https://" + avatar_service_host(settings) + "/AvatarSystem/"