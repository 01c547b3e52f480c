"""
Tests for configuration — config.yaml round trips and context resolution.
"""

import os
import stat
import textwrap
from pathlib import Path

import pytest
import yaml

from kasmctl.core.config.loader import (
    ConfigError,
    config_path,
    load_config,
    load_config_from,
    resolve_context,
    resolve_from_config,
    save_config,
    save_config_to,
)
from kasmctl.core.models.config import Context, KasmConfig


def _ctx(server: str = "https://kasm.example.com", **kw) -> Context:
    return Context(server=server, api_key=kw.pop("api_key", "k"), api_secret=kw.pop("api_secret", "s"), **kw)


class TestConfigPath:
    def test_env_override(self, tmp_path: Path, monkeypatch):
        target = tmp_path / "custom.yaml"
        monkeypatch.setenv("KASMCTL_CONFIG", str(target))
        assert config_path() == target

    def test_default_in_app_dir(self, monkeypatch):
        monkeypatch.delenv("KASMCTL_CONFIG", raising=False)
        path = config_path()
        assert path.name == "config.yaml"
        assert "kasmctl" in str(path.parent)


class TestLoadSave:
    def test_missing_file_is_empty_config(self, tmp_path: Path):
        cfg = load_config_from(tmp_path / "nope.yaml")
        assert cfg.current_context is None
        assert cfg.contexts == []

    def test_empty_file_is_empty_config(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config_from(path).contexts == []

    def test_parses_kebab_case(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(textwrap.dedent("""\
            current-context: prod
            contexts:
              - name: prod
                server: https://kasm.example.com
                api-key: abc
                api-secret: def
                insecure-skip-tls-verify: true
                timeout-seconds: 60
        """))
        cfg = load_config_from(path)
        assert cfg.current_context == "prod"
        ctx = cfg.get_context("prod")
        assert ctx is not None
        assert ctx.api_key == "abc"
        assert ctx.api_secret == "def"
        assert ctx.insecure_skip_tls_verify is True
        assert ctx.timeout_seconds == 60

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("contexts: [unclosed")
        with pytest.raises(ConfigError, match="failed to parse config file"):
            load_config_from(path)

    def test_invalid_shape(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("contexts:\n  - name: x\n")
        with pytest.raises(ConfigError, match="failed to parse config file"):
            load_config_from(path)

    def test_save_creates_parent_dirs(self, tmp_path: Path):
        path = tmp_path / "a" / "b" / "config.yaml"
        cfg = KasmConfig()
        cfg.set_context("dev", _ctx())
        save_config_to(path, cfg)
        assert path.is_file()

    def test_save_omits_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        cfg = KasmConfig()
        cfg.set_context("dev", _ctx())
        save_config_to(path, cfg)

        data = yaml.safe_load(path.read_text())
        entry = data["contexts"][0]
        assert list(entry) == ["name", "server", "api-key", "api-secret"]
        assert "insecure-skip-tls-verify" not in entry
        assert "timeout-seconds" not in entry

    def test_save_keeps_insecure_when_true(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        cfg = KasmConfig()
        cfg.set_context("dev", _ctx(insecure_skip_tls_verify=True))
        save_config_to(path, cfg)
        data = yaml.safe_load(path.read_text())
        assert data["contexts"][0]["insecure-skip-tls-verify"] is True

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_save_restricts_permissions(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        save_config_to(path, KasmConfig())
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_round_trip(self, config_file: Path):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx("https://a.example.com"))
        cfg.set_context("b", _ctx("https://b.example.com", timeout_seconds=5))
        save_config(cfg)

        loaded = load_config()
        assert loaded.current_context == "a"
        assert [c.name for c in loaded.contexts] == ["a", "b"]
        assert loaded.get_context("b").timeout_seconds == 5


class TestSetContext:
    def test_first_context_becomes_current(self):
        cfg = KasmConfig()
        cfg.set_context("first", _ctx())
        cfg.set_context("second", _ctx())
        assert cfg.current_context == "first"

    def test_upsert_replaces_in_place(self):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx("https://old.example.com"))
        cfg.set_context("b", _ctx())
        cfg.set_context("a", _ctx("https://new.example.com"))
        assert [c.name for c in cfg.contexts] == ["a", "b"]
        assert cfg.get_context("a").server == "https://new.example.com"


class TestResolveContext:
    def test_no_context_configured(self):
        with pytest.raises(ConfigError, match="no context configured"):
            resolve_from_config(KasmConfig())

    def test_unknown_context(self):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx())
        with pytest.raises(ConfigError, match="not found"):
            resolve_from_config(cfg, "missing")

    def test_current_context_used(self):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx("https://a.example.com"))
        cfg.set_context("b", _ctx("https://b.example.com"))
        assert resolve_from_config(cfg).server == "https://a.example.com"

    def test_context_flag_beats_current(self):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx("https://a.example.com"))
        cfg.set_context("b", _ctx("https://b.example.com"))
        assert resolve_from_config(cfg, "b").server == "https://b.example.com"

    def test_server_flag_requires_env(self, config_file: Path):
        with pytest.raises(ConfigError, match="KASMCTL_API_KEY"):
            resolve_context(server_override="https://x.example.com")

    def test_server_flag_requires_secret(self, config_file: Path, monkeypatch):
        monkeypatch.setenv("KASMCTL_API_KEY", "k")
        with pytest.raises(ConfigError, match="KASMCTL_API_SECRET"):
            resolve_context(server_override="https://x.example.com")

    def test_server_flag_beats_config(self, config_file: Path, monkeypatch):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx("https://a.example.com"))
        save_config(cfg)
        monkeypatch.setenv("KASMCTL_API_KEY", "envkey")
        monkeypatch.setenv("KASMCTL_API_SECRET", "envsecret")

        ctx = resolve_context(server_override="https://x.example.com", context_override="a")
        assert ctx.server == "https://x.example.com"
        assert ctx.api_key == "envkey"
        assert ctx.api_secret == "envsecret"

    def test_insecure_forces_tls_off(self, config_file: Path):
        cfg = KasmConfig()
        cfg.set_context("a", _ctx())
        save_config(cfg)
        assert resolve_context().insecure_skip_tls_verify is False
        assert resolve_context(insecure=True).insecure_skip_tls_verify is True
