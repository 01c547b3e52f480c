"""
Tests for the packaging formula — manifest, checks, checksums, Homebrew rendering.
"""

import hashlib
import json
from pathlib import Path
from urllib.parse import urlparse

import pytest
from pydantic import ValidationError
from click.testing import CliRunner

from kasmctl.core.config.formula_loader import (
    DEFAULT_FORMULA_PATH,
    FormulaLoadError,
    load_formula,
    save_formula,
)
from kasmctl.core.models import Formula, Variant
from kasmctl.core.services.formula import check_formula, render_homebrew, update_checksums
from kasmctl.core.services.formula.detection import normalize_arch, normalize_os
from kasmctl.main import cli

DIGEST = "a" * 64


def _formula(**overrides) -> Formula:
    data = {
        "name": "kasmctl",
        "desc": "Command-line tool for managing Kasm Workspaces",
        "homepage": "https://github.com/PhilipCramer/kasmctl",
        "version": "0.1.0",
        "license": "Apache-2.0",
        "url_template": "https://github.com/PhilipCramer/kasmctl/releases/download/"
                        "v{version}/kasmctl-{os}-{arch}.tar.gz",
        "binary": "kasmctl",
        "variants": [
            {"os": "darwin", "arch": "amd64", "sha256": DIGEST},
            {"os": "darwin", "arch": "arm64", "sha256": DIGEST},
            {"os": "linux", "arch": "amd64", "sha256": DIGEST},
        ],
    }
    data.update(overrides)
    return Formula.model_validate(data)


class TestPackagedManifest:
    """Properties the published manifest must always satisfy."""

    @pytest.fixture
    def formula(self) -> Formula:
        return load_formula()

    def test_loads(self, formula):
        assert DEFAULT_FORMULA_PATH.is_file()
        assert formula.name == "kasmctl"
        assert formula.binary_name == "kasmctl"

    def test_declared_variants(self, formula):
        assert formula.platforms() == ["darwin-amd64", "darwin-arm64", "linux-amd64"]

    def test_every_url_well_formed_and_versioned(self, formula):
        for variant in formula.variants:
            url = formula.url_for(variant)
            parsed = urlparse(url)
            assert parsed.scheme == "https"
            assert parsed.netloc == "github.com"
            assert formula.version in url
            assert url.endswith(f"kasmctl-{variant.os}-{variant.arch}.tar.gz")

    def test_every_checksum_non_empty(self, formula):
        for variant in formula.variants:
            assert variant.sha256.strip()

    def test_smoke_test_expectation(self, formula):
        assert formula.test.args == ["--help"]
        assert formula.test.expect == "kasmctl"

    def test_check_passes_with_placeholder_warnings(self, formula):
        result = check_formula(formula)
        assert result.valid
        assert result.errors == []
        assert len(result.warnings) == len(formula.variants)


class TestFormulaModel:
    def test_version_v_prefix_stripped(self):
        assert _formula(version="v1.2.3").version == "1.2.3"

    def test_variant_keys_lowercased(self):
        v = Variant(os="Darwin", arch="ARM64", sha256=DIGEST)
        assert v.key == "darwin-arm64"
        assert v.has_valid_checksum

    def test_placeholder_is_not_valid_checksum(self):
        assert not Variant(os="linux", arch="amd64", sha256="PLACEHOLDER").has_valid_checksum

    def test_explicit_url_wins(self):
        f = _formula()
        v = Variant(os="linux", arch="amd64", sha256=DIGEST, url="https://mirror.example.com/k.tgz")
        assert f.url_for(v) == "https://mirror.example.com/k.tgz"
        assert f.asset_name(v) == "k.tgz"

    def test_get_variant(self):
        f = _formula()
        assert f.get_variant("LINUX", "amd64").key == "linux-amd64"
        assert f.get_variant("linux", "arm64") is None

    def test_binary_defaults_to_name(self):
        assert _formula(binary="").binary_name == "kasmctl"

    @pytest.mark.parametrize(
        "template",
        [
            "https://example.com/{version}/{platform}.tar.gz",
            "https://example.com/{version}/{}.tar.gz",
            "https://example.com/{version/{os}-{arch}.tar.gz",
        ],
    )
    def test_bad_url_template_rejected(self, template):
        with pytest.raises(ValidationError, match="url_template"):
            _formula(url_template=template)

    @pytest.mark.parametrize(("os_name", "arch"), [("windows", "amd64"), ("linux", "386"), ("lnux", "amd64")])
    def test_unknown_platform_rejected(self, os_name, arch):
        with pytest.raises(ValidationError):
            Variant(os=os_name, arch=arch, sha256=DIGEST)


class TestDetection:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("x86_64", "amd64"), ("AMD64", "amd64"), ("aarch64", "arm64"), ("arm64", "arm64")],
    )
    def test_arch(self, raw, expected):
        assert normalize_arch(raw) == expected

    @pytest.mark.parametrize(("raw", "expected"), [("Darwin", "darwin"), ("Linux", "linux")])
    def test_os(self, raw, expected):
        assert normalize_os(raw) == expected


class TestCheckFormula:
    def test_valid(self):
        result = check_formula(_formula())
        assert result.valid
        assert result.warnings == []
        assert result.to_dict()["variant_count"] == 3

    def test_no_variants(self):
        result = check_formula(_formula(variants=[]))
        assert not result.valid
        assert "No variants declared." in result.errors

    def test_empty_checksum(self):
        result = check_formula(_formula(variants=[{"os": "linux", "arch": "amd64", "sha256": ""}]))
        assert not result.valid
        assert any("checksum is empty" in e for e in result.errors)

    def test_url_missing_version(self):
        result = check_formula(_formula(url_template="https://example.com/kasmctl-{os}-{arch}.tar.gz"))
        assert not result.valid
        assert any("does not contain version" in e for e in result.errors)

    def test_malformed_url(self):
        result = check_formula(_formula(url_template="github.com/{version}/{os}-{arch}"))
        assert any("not well-formed" in e for e in result.errors)

    def test_duplicate_variant(self):
        variants = [{"os": "linux", "arch": "amd64", "sha256": DIGEST}] * 2
        result = check_formula(_formula(variants=variants))
        assert any("declared more than once" in e for e in result.errors)


class TestUpdateChecksums:
    def test_fills_digests_from_dist(self, tmp_path: Path):
        archive = tmp_path / "kasmctl-linux-amd64.tar.gz"
        archive.write_bytes(b"release bytes")
        f = _formula(variants=[
            {"os": "linux", "arch": "amd64", "sha256": "PLACEHOLDER"},
            {"os": "darwin", "arch": "arm64", "sha256": "PLACEHOLDER"},
        ])

        updated, done, missing = update_checksums(f, tmp_path)
        assert done == ["linux-amd64"]
        assert missing == ["darwin-arm64"]
        assert updated.get_variant("linux", "amd64").sha256 == hashlib.sha256(b"release bytes").hexdigest()
        # Input is untouched.
        assert f.get_variant("linux", "amd64").sha256 == "PLACEHOLDER"

    def test_save_and_reload(self, tmp_path: Path):
        path = tmp_path / "formula.yml"
        save_formula(_formula(), path)
        assert load_formula(path) == _formula()


class TestLoader:
    def test_missing(self, tmp_path: Path):
        with pytest.raises(FormulaLoadError, match="not found"):
            load_formula(tmp_path / "nope.yml")

    def test_invalid(self, tmp_path: Path):
        path = tmp_path / "formula.yml"
        path.write_text("name: kasmctl\n")
        with pytest.raises(FormulaLoadError, match="Invalid formula manifest"):
            load_formula(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "formula.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(FormulaLoadError, match="Expected a YAML mapping"):
            load_formula(path)

    def test_typo_in_variant_fails_at_load(self, tmp_path: Path):
        path = tmp_path / "formula.yml"
        save_formula(_formula(), path)
        path.write_text(path.read_text().replace("os: darwin", "os: darwn", 1))
        with pytest.raises(FormulaLoadError, match="Invalid formula manifest"):
            load_formula(path)

    def test_unknown_placeholder_fails_at_load(self, tmp_path: Path):
        path = tmp_path / "formula.yml"
        save_formula(_formula(), path)
        path.write_text(path.read_text().replace("{arch}", "{cpu}"))
        with pytest.raises(FormulaLoadError, match="unknown placeholder"):
            load_formula(path)


class TestHomebrew:
    def test_render(self):
        rb = render_homebrew(_formula())
        assert rb.startswith("# typed: false\n# frozen_string_literal: true\n")
        assert "class Kasmctl < Formula" in rb
        assert 'version "0.1.0"' in rb
        assert 'license "Apache-2.0"' in rb
        assert "on_macos do" in rb
        assert "on_linux do" in rb
        assert "on_intel do" in rb
        assert "on_arm do" in rb
        assert (
            'url "https://github.com/PhilipCramer/kasmctl/releases/download/'
            'v#{version}/kasmctl-linux-amd64.tar.gz"'
        ) in rb
        assert f'sha256 "{DIGEST}"' in rb
        assert 'bin.install "kasmctl"' in rb
        assert 'assert_match "kasmctl", shell_output("#{bin}/kasmctl --help")' in rb

    def test_linux_block_has_no_arm(self):
        rb = render_homebrew(_formula())
        linux_block = rb.split("on_linux do", 1)[1].split("\n  end", 1)[0]
        assert "on_intel" in linux_block
        assert "on_arm" not in linux_block


class TestFormulaCLI:
    def _manifest(self, tmp_path: Path, **overrides) -> Path:
        path = tmp_path / "formula.yml"
        save_formula(_formula(**overrides), path)
        return path

    def test_show_json(self, tmp_path: Path):
        path = self._manifest(tmp_path)
        result = CliRunner().invoke(cli, ["formula", "--manifest", str(path), "show", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["version"] == "0.1.0"
        assert data["variants"][2]["resolved_url"].endswith("kasmctl-linux-amd64.tar.gz")

    def test_show_packaged(self):
        result = CliRunner().invoke(cli, ["formula", "show"])
        assert result.exit_code == 0
        assert "kasmctl 0.1.0" in result.output

    def test_check_ok(self, tmp_path: Path):
        path = self._manifest(tmp_path)
        result = CliRunner().invoke(cli, ["formula", "--manifest", str(path), "check"])
        assert result.exit_code == 0
        assert "Formula is valid" in result.output

    def test_check_strict_fails_on_placeholder(self):
        result = CliRunner().invoke(cli, ["formula", "check", "--strict"])
        assert result.exit_code == 1
        assert "not a sha256 digest" in result.output

    def test_check_invalid_json(self, tmp_path: Path):
        path = self._manifest(tmp_path, variants=[])
        result = CliRunner().invoke(cli, ["formula", "--manifest", str(path), "check", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.output)["valid"] is False

    def test_render_to_file(self, tmp_path: Path):
        path = self._manifest(tmp_path)
        out = tmp_path / "Formula" / "kasmctl.rb"
        result = CliRunner().invoke(
            cli, ["formula", "--manifest", str(path), "render", "--output-file", str(out)],
        )
        assert result.exit_code == 0, result.output
        assert "class Kasmctl < Formula" in out.read_text()

    def test_update_checksums_writes_manifest(self, tmp_path: Path):
        path = self._manifest(tmp_path, variants=[{"os": "linux", "arch": "amd64", "sha256": "PLACEHOLDER"}])
        dist = tmp_path / "dist"
        dist.mkdir()
        (dist / "kasmctl-linux-amd64.tar.gz").write_bytes(b"x")

        result = CliRunner().invoke(
            cli, ["formula", "--manifest", str(path), "update-checksums", str(dist)],
        )
        assert result.exit_code == 0, result.output
        assert load_formula(path).variants[0].sha256 == hashlib.sha256(b"x").hexdigest()

    def test_update_checksums_nothing_found(self, tmp_path: Path):
        path = self._manifest(tmp_path)
        dist = tmp_path / "dist"
        dist.mkdir()
        result = CliRunner().invoke(
            cli, ["formula", "--manifest", str(path), "update-checksums", str(dist)],
        )
        assert result.exit_code == 1
        assert "No release archives found" in result.output
        assert load_formula(path).variants[0].sha256 == DIGEST
