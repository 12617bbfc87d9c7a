"""Tests for secrets configuration loading."""

import pytest

from foundry_secrets import SecretsConfigError, SecretsConfigModel, load_secrets_config
from foundry_secrets.loader import find_config_file


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "secrets.yaml"
    path.write_text(
        """
secrets:
  instance: myapp-prod
  namespace: apps
  override_file: ~/custom-vars
  openbao:
    enabled: true
    address: "https://openbao.example.com:8200"
    mount: foundry-core
    timeout: 5
"""
    )
    return path


class TestLoadSecretsConfig:
    """Test loading from YAML."""

    def test_no_config_file_gives_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        config = load_secrets_config()
        assert config == SecretsConfigModel()
        assert config.openbao is None

    def test_load_explicit_file(self, config_file):
        config = load_secrets_config(config_file)

        assert config.instance == "myapp-prod"
        assert config.namespace == "apps"
        assert config.use_env is True
        assert config.override_file == "~/custom-vars"
        assert config.openbao is not None
        assert config.openbao.enabled is True
        assert config.openbao.address == "https://openbao.example.com:8200"
        assert config.openbao.mount == "foundry-core"
        assert config.openbao.timeout == 5.0
        assert config.openbao.token_env == "OPENBAO_TOKEN"
        assert config.openbao.read_path == "{mount}/data/{path}"

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_secrets_config(tmp_path / "nope.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "secrets.yaml"
        path.write_text("")
        assert load_secrets_config(path) == SecretsConfigModel()

    def test_missing_section_gives_defaults(self, tmp_path):
        path = tmp_path / "secrets.yaml"
        path.write_text("other: value\n")
        assert load_secrets_config(path) == SecretsConfigModel()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "secrets.yaml"
        path.write_text("secrets: [unclosed\n")
        with pytest.raises(SecretsConfigError, match="Failed to parse YAML"):
            load_secrets_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "secrets.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SecretsConfigError, match="expected a mapping"):
            load_secrets_config(path)

    @pytest.mark.parametrize(
        "section",
        [
            "secrets:\n  unknown_field: 1\n",
            "secrets:\n  openbao:\n    timeout: 0\n",
            "secrets:\n  openbao:\n    mount: ''\n",
        ],
    )
    def test_invalid_schema(self, tmp_path, section):
        path = tmp_path / "secrets.yaml"
        path.write_text(section)
        with pytest.raises(SecretsConfigError, match="Invalid secrets config"):
            load_secrets_config(path)

    def test_config_is_frozen(self, config_file):
        config = load_secrets_config(config_file)
        with pytest.raises(Exception):
            config.instance = "other"  # type: ignore[misc]


class TestEnvironmentOverrides:
    """Test OPENBAO_ADDR handling."""

    def test_address_override(self, monkeypatch, config_file):
        monkeypatch.setenv("OPENBAO_ADDR", "https://other.example.com")

        config = load_secrets_config(config_file)
        assert config.openbao.address == "https://other.example.com"
        assert config.openbao.mount == "foundry-core"

    def test_address_override_does_not_enable(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("OPENBAO_ADDR", "https://openbao.example.com")

        config = load_secrets_config()
        assert config.openbao is not None
        assert config.openbao.address == "https://openbao.example.com"
        assert config.openbao.enabled is False


class TestFindConfigFile:
    """Test the config file search order."""

    def test_nothing_found(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None

    def test_environment_variable_wins(self, monkeypatch, tmp_path, config_file):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "foundry-secrets.yaml").write_text("")
        monkeypatch.setenv("FOUNDRY_SECRETS_CONFIG", str(config_file))
        assert find_config_file() == config_file

    def test_config_dir_before_working_directory(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        local = tmp_path / "foundry-secrets.yaml"
        local.write_text("")
        assert find_config_file() == local

        config_dir = tmp_path / "home" / ".foundry"
        config_dir.mkdir()
        (config_dir / "secrets.yaml").write_text("")
        assert find_config_file() == config_dir / "secrets.yaml"
