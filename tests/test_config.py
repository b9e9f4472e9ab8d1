from pathlib import Path

from core.config import AppSettings


def test_legacy_environment_names(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("USE_POSTGRES", "true")
    monkeypatch.setenv("GO_VERSION", "18.2.0-6228")
    monkeypatch.setenv("EXTENSIONS_USER", "ext")
    monkeypatch.setenv("EXTENSIONS_PASSWORD", "secret")
    monkeypatch.setenv("EA_PLUGIN_DOWNLOAD_URL", "https://example.test/ea.jar")
    monkeypatch.setenv("ANALYTICS_PLUGIN_DOWNLOAD_URL", "https://example.test/a.jar")

    settings = AppSettings()

    assert settings.use_postgres is True
    assert settings.go_version == "18.2.0-6228"
    assert settings.extensions_user == "ext"
    assert settings.extensions_password == "secret"
    assert settings.ea_plugin_download_url == "https://example.test/ea.jar"
    assert settings.analytics_plugin_download_url == "https://example.test/a.jar"


def test_prefixed_environment_names(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GOCD_PROVISION_SERVER_URL", "http://gocd.test:8153/go/")
    monkeypatch.setenv("GOCD_PROVISION_PIPELINE_TIMEOUT_SECONDS", "30")

    settings = AppSettings()

    assert settings.api_url == "http://gocd.test:8153/go"
    assert settings.pipeline_timeout_seconds == 30


def test_defaults_match_vm_layout(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("USE_POSTGRES", "GOCD_PROVISION_USE_POSTGRES"):
        monkeypatch.delenv(name, raising=False)

    settings = AppSettings()

    assert settings.use_postgres is False
    assert settings.server_init_script == "/etc/init.d/go-server"
    assert settings.agent_init_script == "/etc/init.d/go-agent"
    assert settings.pipeline_config_file == Path("/vagrant/provision/filesystem/pipeline.json")
