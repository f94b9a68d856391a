import pytest

from fermi_sdk.utils.config_loader import (
    DEFAULT_CONTINUUM_ENDPOINT,
    env_config,
    load_config,
    validate_config,
)

CONFIG_YAML = """
continuum:
  endpoint: http://seq.test:9090
  connect_timeout_seconds: 5
rpc:
  endpoint: http://node.test:8080
logging:
  level: DEBUG
"""


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in ("FERMI_CONTINUUM_ENDPOINT", "FERMI_RPC_ENDPOINT", "FERMI_KEYPAIR_PATH", "FERMI_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path, text=CONFIG_YAML):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_reads_yaml(tmp_path):
    cfg = load_config(_write(tmp_path), force_reload=True)
    assert cfg["continuum"]["endpoint"] == "http://seq.test:9090"
    assert cfg["continuum"]["connect_timeout_seconds"] == 5
    assert cfg["logging"]["level"] == "DEBUG"


def test_load_config_returns_copies(tmp_path):
    path = _write(tmp_path)
    cfg = load_config(path, force_reload=True)
    cfg["rpc"]["endpoint"] = "mutated"
    assert load_config(path)["rpc"]["endpoint"] == "http://node.test:8080"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("FERMI_CONTINUUM_ENDPOINT", "https://seq.prod")
    monkeypatch.setenv("FERMI_KEYPAIR_PATH", "/keys/id.json")
    monkeypatch.setenv("FERMI_LOG_LEVEL", "warning")

    cfg = load_config(_write(tmp_path), force_reload=True)
    assert cfg["continuum"]["endpoint"] == "https://seq.prod"
    assert cfg["keypair"]["path"] == "/keys/id.json"
    assert cfg["logging"]["level"] == "WARNING"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml", force_reload=True)


def test_missing_section_is_rejected(tmp_path):
    path = _write(tmp_path, "continuum:\n  endpoint: http://seq.test:9090\n")
    with pytest.raises(ValueError, match="rpc"):
        load_config(path, force_reload=True)


def test_non_mapping_is_rejected(tmp_path):
    with pytest.raises(ValueError, match="mapping"):
        load_config(_write(tmp_path, "- a\n- b\n"), force_reload=True)


def test_blank_endpoint_is_rejected():
    with pytest.raises(ValueError, match="continuum.endpoint"):
        validate_config({"continuum": {"endpoint": "  "}, "rpc": {"endpoint": "http://x"}})


def test_env_config_defaults(monkeypatch):
    assert env_config()["continuum"]["endpoint"] == DEFAULT_CONTINUUM_ENDPOINT
    monkeypatch.setenv("FERMI_RPC_ENDPOINT", "http://node.env:8080")
    assert env_config()["rpc"]["endpoint"] == "http://node.env:8080"


def test_each_path_is_cached_separately(tmp_path):
    first = _write(tmp_path)
    other_dir = tmp_path / "other"
    other_dir.mkdir()
    second = _write(other_dir, CONFIG_YAML.replace("seq.test", "seq.other"))

    assert load_config(first, force_reload=True)["continuum"]["endpoint"] == "http://seq.test:9090"
    assert load_config(second, force_reload=True)["continuum"]["endpoint"] == "http://seq.other:9090"

    first.write_text(CONFIG_YAML.replace("seq.test", "seq.changed"), encoding="utf-8")
    assert load_config(first)["continuum"]["endpoint"] == "http://seq.test:9090"
    assert load_config(first, force_reload=True)["continuum"]["endpoint"] == "http://seq.changed:9090"


def test_invalid_yaml_is_a_value_error(tmp_path):
    with pytest.raises(ValueError, match="invalid YAML"):
        load_config(_write(tmp_path, "continuum: [unclosed\n"), force_reload=True)
