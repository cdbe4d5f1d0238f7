# SPDX-License-Identifier: MIT
"""Tests for MermaidGenerator."""

from pathlib import Path

from unibuild.builders.multiarch import MultiArchGraphBuilder, UniversalBinaryTarget
from unibuild.configure.options import BuildOptions
from unibuild.core.graph import BuildGraph
from unibuild.generators.mermaid import MermaidGenerator


def build_watch_graph() -> BuildGraph:
    builder = MultiArchGraphBuilder(BuildOptions())
    builder.build_graph(
        UniversalBinaryTarget(
            "bin", platform_type="watchos", cpus=["armv7k", "arm64_32"], sources=["a.cc"]
        )
    )
    return builder.graph


class TestMermaidGeneratorBasic:
    def test_generator_creation(self):
        gen = MermaidGenerator()
        assert gen.name == "mermaid"
        assert gen.output_filename == "graph.mmd"

    def test_generator_with_options(self):
        gen = MermaidGenerator(direction="TB", output_filename="actions.mmd")
        assert gen._direction == "TB"
        assert gen.output_filename == "actions.mmd"


class TestMermaidRender:
    def test_empty_graph(self):
        output = MermaidGenerator().render(BuildGraph(), "empty")
        assert "flowchart LR" in output
        assert "empty Actions" in output
        assert "No actions" in output

    def test_actions_and_artifacts(self):
        output = MermaidGenerator().render(build_watch_graph(), "bin")
        assert 'a0{{"ObjcLink watchos_armv7k"}}' in output
        assert 'a1{{"ObjcLink watchos_arm64_32"}}' in output
        assert 'a2{{"Lipo"}}' in output
        assert "a_cc>a.cc]" in output
        assert "bin_bin_lipobin[[bin_lipobin]]" in output

    def test_edges(self):
        output = MermaidGenerator().render(build_watch_graph())
        assert "a_cc --> a0" in output
        assert "a0 --> bin_watchos_armv7k_bin_bin" in output
        assert "bin_watchos_armv7k_bin_bin --> a2" in output
        assert "bin_watchos_arm64_32_bin_bin --> a2" in output
        assert "a2 --> bin_bin_lipobin" in output

    def test_source_declared_once(self):
        output = MermaidGenerator().render(build_watch_graph())
        assert output.count("a_cc>a.cc]") == 1

    def test_sanitize_id(self):
        gen = MermaidGenerator()
        assert gen._sanitize_id("bin/ios-arm64/x.o") == "bin_ios_arm64_x_o"
        assert gen._sanitize_id("1st") == "n1st"


class TestMermaidGenerate:
    def test_writes_file(self, tmp_path: Path):
        output_file = MermaidGenerator().generate(build_watch_graph(), tmp_path / "out", "bin")
        assert output_file == tmp_path / "out" / "graph.mmd"
        assert "flowchart LR" in output_file.read_text()
