"""
Homebrew rendering — emit the Ruby formula for a manifest.

Variants are grouped by OS (``on_macos`` / ``on_linux``) and then by CPU
(``on_intel`` / ``on_arm``).  URLs keep the ``#{version}`` interpolation
so the Ruby file reads like a hand-written tap formula.
"""

from __future__ import annotations

from kasmctl.core.models.formula import Formula, Variant

_OS_BLOCKS = (("darwin", "on_macos"), ("linux", "on_linux"))
_ARCH_BLOCKS = (("amd64", "on_intel"), ("arm64", "on_arm"))


def _class_name(name: str) -> str:
    return "".join(part.capitalize() for part in name.replace("_", "-").split("-"))


def _ruby_url(formula: Formula, variant: Variant) -> str:
    if variant.url:
        return variant.url
    # Same substitution as Formula.url_for, except the version stays a
    # Ruby interpolation.
    return (
        formula.url_template
        .replace("{version}", "#{version}")
        .replace("{os}", variant.os)
        .replace("{arch}", variant.arch)
    )


def render_homebrew(formula: Formula) -> str:
    """Render a Homebrew formula (``<name>.rb``) from a manifest."""
    lines = [
        "# typed: false",
        "# frozen_string_literal: true",
        "",
        f"class {_class_name(formula.name)} < Formula",
        f'  desc "{formula.desc}"',
        f'  homepage "{formula.homepage}"',
        f'  version "{formula.version}"',
    ]
    if formula.license:
        lines.append(f'  license "{formula.license}"')

    for os_name, os_block in _OS_BLOCKS:
        os_variants = [v for v in formula.variants if v.os == os_name]
        if not os_variants:
            continue
        lines += ["", f"  {os_block} do"]
        first = True
        for arch, arch_block in _ARCH_BLOCKS:
            variant = next((v for v in os_variants if v.arch == arch), None)
            if variant is None:
                continue
            if not first:
                lines.append("")
            first = False
            lines += [
                f"    {arch_block} do",
                f'      url "{_ruby_url(formula, variant)}"',
                f'      sha256 "{variant.sha256}"',
                "    end",
            ]
        lines.append("  end")

    test_args = " ".join(formula.test.args)
    lines += [
        "",
        "  def install",
        f'    bin.install "{formula.binary_name}"',
        "  end",
        "",
        "  test do",
        f'    assert_match "{formula.test.expect}", '
        f'shell_output("#{{bin}}/{formula.binary_name} {test_args}")',
        "  end",
        "end",
    ]
    return "\n".join(lines) + "\n"
