import pytest

from emergekit.environment import (
    PluginSettings,
    avatar_service_api_url,
    avatar_service_host,
    futurepass_api_url,
    futurepass_chain_id,
    futureverse_auth_url,
    futureverse_create_futurepass_url,
    futureverse_helper_service_url,
    futureverse_signer_url,
    inventory_service_api_url,
    inventory_service_host,
)

STAGING_HOST = "dysaw5zhak.us-east-1.awsapprunner.com"
PRODUCTION_HOST = "7vz9y7rdpy.us-east-1.awsapprunner.com"


def test_futureverse_environment_defaults_to_production():
    assert PluginSettings().futureverse_environment() == "Production"
    assert PluginSettings(shipping=True).futureverse_environment() == "Production"


def test_futureverse_environment_follows_build_type():
    settings = PluginSettings(
        futureverse_shipping_environment="Production",
        futureverse_development_environment="Staging",
    )
    assert settings.futureverse_environment() == "Staging"
    settings.shipping = True
    assert settings.futureverse_environment() == "Production"


def test_empty_configured_environment_is_kept():
    assert PluginSettings(futureverse_development_environment="").futureverse_environment() == ""


def test_production_urls():
    settings = PluginSettings()
    assert futureverse_create_futurepass_url(settings) == "https://futurepass.futureverse.app/"
    assert futurepass_chain_id(settings) == "1"
    assert futurepass_api_url(settings) == "https://account-indexer.pass.online/api/v1"
    assert futureverse_signer_url(settings) == "https://signer.pass.online"
    assert futureverse_auth_url(settings) == "https://login.pass.online"


@pytest.mark.parametrize("environment", ["Staging", "Development"])
def test_non_production_urls(environment):
    settings = PluginSettings(futureverse_development_environment=environment)
    assert futureverse_create_futurepass_url(settings) == "https://identity-dashboard.futureverse.cloud/"
    assert futurepass_chain_id(settings) == "11155111"
    assert futurepass_api_url(settings) == "https://account-indexer.passonline.dev/api/v1"
    assert futureverse_signer_url(settings) == "https://signer.passonline.cloud"
    assert futureverse_auth_url(settings) == "https://login.passonline.cloud"


def test_default_settings_used_when_omitted():
    assert futurepass_chain_id() == futurepass_chain_id(PluginSettings())


def test_helper_service_url():
    assert futureverse_helper_service_url() == "https://fvhelperservice.openmeta.xyz/"


def test_inventory_host_defaults_by_build_type():
    assert inventory_service_host(PluginSettings()) == STAGING_HOST
    assert inventory_service_host(PluginSettings(shipping=True)) == PRODUCTION_HOST


def test_inventory_host_reads_swapped_keys():
    assert inventory_service_host(PluginSettings(shipping_environment="Production")) == PRODUCTION_HOST
    assert inventory_service_host(PluginSettings(development_environment="Production")) == STAGING_HOST
    assert (
        inventory_service_host(PluginSettings(shipping=True, development_environment="Staging"))
        == STAGING_HOST
    )


def test_development_mode_forces_staging_inventory():
    settings = PluginSettings(shipping=True, enable_development_environment=True)
    assert inventory_service_host(settings) == STAGING_HOST


@pytest.mark.parametrize(
    "settings",
    [
        PluginSettings(),
        PluginSettings(shipping=True),
        PluginSettings(shipping_environment="Production"),
        PluginSettings(enable_development_environment=True),
    ],
)
def test_avatar_host_is_always_staging(settings):
    assert avatar_service_host(settings) == STAGING_HOST


def test_api_urls():
    assert inventory_service_api_url(PluginSettings(shipping=True)) == (
        "https://" + PRODUCTION_HOST + "/InventoryService/"
    )
    assert avatar_service_api_url() == "https://" + STAGING_HOST + "/AvatarSystem/"