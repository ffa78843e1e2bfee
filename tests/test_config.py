from leasedesk_app.config import load_settings, resolve_stage


def test_unknown_stage_falls_back_to_prod():
    assert resolve_stage("qa") == "prod"
    assert resolve_stage(None) == "prod"
    assert resolve_stage(" LOCAL ") == "local"


def test_stage_defaults():
    settings = load_settings({"LEASEDESK_STAGE": "local"})
    assert settings.debug is True
    assert settings.api_timeout == 30
    assert settings.search_debounce_ms == 350
    assert settings.default_page_size == 10

    settings = load_settings({"LEASEDESK_STAGE": "bogus"})
    assert settings.stage == "prod"
    assert settings.debug is False
    assert settings.api_timeout == 10


def test_overrides():
    settings = load_settings({"API_BASE_URL": "https://api.example.com/api/", "API_TIMEOUT": "5", "DEFAULT_PAGE_SIZE": "25"})
    assert settings.api_base_url == "https://api.example.com/api"
    assert settings.api_timeout == 5
    assert settings.default_page_size == 25
