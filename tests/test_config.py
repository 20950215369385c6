from portfolio_site.config import DEFAULT_METRIC_SUFFIXES, DEFAULT_PROJECT_FILES, load_config, supported_language


def test_defaults(monkeypatch):
    for name in ("PORTFOLIO_PROJECT_FILES", "PORTFOLIO_METRIC_SUFFIXES", "PORTFOLIO_PROBE_IMAGES"):
        monkeypatch.delenv(name, raising=False)
    config = load_config()
    assert config.project_files == DEFAULT_PROJECT_FILES
    assert config.metric_suffixes == DEFAULT_METRIC_SUFFIXES
    assert config.probe_images is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORTFOLIO_BASE_URL", "http://example.com/site/")
    monkeypatch.setenv("PORTFOLIO_PROJECT_FILES", "data/a.json, data/b.json,")
    monkeypatch.setenv("PORTFOLIO_METRIC_SUFFIXES", "kg,km")
    monkeypatch.setenv("PORTFOLIO_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("PORTFOLIO_PROBE_IMAGES", "true")
    config = load_config()
    assert config.base_url == "http://example.com/site/"
    assert config.project_files == ("data/a.json", "data/b.json")
    assert config.metric_suffixes == ("kg", "km")
    assert config.fetch_timeout == 2.5
    assert config.probe_images is True


def test_unsupported_default_language_falls_back(monkeypatch, caplog):
    monkeypatch.setenv("PORTFOLIO_DEFAULT_LANGUAGE", "ja")
    assert load_config().default_language == "ko"
    assert "Unsupported default language" in caplog.text


def test_supported_language_normalises_case():
    assert supported_language(" EN ") == "en"
    assert supported_language(None) == "ko"
