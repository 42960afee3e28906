"""Tests for CLI interface."""

import json
import os
import tempfile

from click.testing import CliRunner

from galalith.generator.cli import cli

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def describe_gen_command():
    def generates_cpp_code(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(
                cli,
                [
                    "gen",
                    "-l",
                    "cpp",
                    "-i",
                    f"{FILE_DIR}/registry.json",
                    "-o",
                    tmpdir,
                ],
            )
            expect(result.exit_code) == 0
            expect("Generated 7 files" in result.output) == True
            root = os.path.join(tmpdir, "cppProtocol")
            expect(os.path.isfile(os.path.join(root, "Point.h"))) == True
            expect(os.path.isfile(os.path.join(root, "Packet", "Sub", "ObjectB.h"))) == True
            expect(os.path.isfile(os.path.join(root, "ProtocolManager.h"))) == True
            expect(os.path.isfile(os.path.join(root, "ByteBuffer.h"))) == True

    def generates_typescript_code(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(
                cli,
                [
                    "gen",
                    "-l",
                    "typescript",
                    "-i",
                    f"{FILE_DIR}/registry.json",
                    "-o",
                    tmpdir,
                ],
            )
            expect(result.exit_code) == 0
            root = os.path.join(tmpdir, "tsProtocol")
            with open(os.path.join(root, "Point.ts")) as f:
                content = f.read()
            expect("class Point {" in content) == True
            expect(os.path.isfile(os.path.join(root, "buffer", "ByteBuffer.ts"))) == True

    def keeps_previous_output_with_no_clean(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            stale = os.path.join(tmpdir, "tsProtocol", "Stale.ts")
            os.makedirs(os.path.dirname(stale))
            with open(stale, "w") as f:
                f.write("// stale")

            args = ["gen", "-l", "typescript", "-i", f"{FILE_DIR}/registry.json", "-o", tmpdir]
            result = runner.invoke(cli, [*args, "--no-clean"])
            expect(result.exit_code) == 0
            expect(os.path.isfile(stale)) == True

            result = runner.invoke(cli, args)
            expect(result.exit_code) == 0
            expect(os.path.isfile(stale)) == False

    def fails_with_unknown_language(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "gen",
                "-l",
                "unknown",
                "-i",
                f"{FILE_DIR}/registry.json",
                "-o",
                "/tmp/out",
            ],
        )
        expect(result.exit_code) == 1
        expect("Unknown language" in result.output) == True

    def fails_with_missing_input(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            result = runner.invoke(
                cli,
                ["gen", "-l", "cpp", "-i", "/nonexistent/registry.json", "-o", tmpdir],
            )
        expect(result.exit_code) == 1
        expect("Error:" in result.output) == True

    def fails_with_invalid_registry(expect):
        runner = CliRunner()
        with tempfile.TemporaryDirectory() as tmpdir:
            registry = os.path.join(tmpdir, "registry.json")
            with open(registry, "w") as f:
                json.dump(
                    {"messages": [{"id": 1, "name": "A", "fields": [{"name": "x", "type": "B"}]}]},
                    f,
                )
            result = runner.invoke(cli, ["gen", "-l", "cpp", "-i", registry, "-o", tmpdir])
            expect(result.exit_code) == 1
            expect("A.x: Unknown type B" in result.output) == True
            expect(os.path.exists(os.path.join(tmpdir, "cppProtocol", "A.h"))) == False

    def requires_all_options(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["gen", "-l", "cpp"])
        expect(result.exit_code) != 0
        expect("Missing option" in result.output) == True


def describe_info_command():
    def outputs_json(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", f"{FILE_DIR}/registry.json", "--json"])
        expect(result.exit_code) == 0

        messages = json.loads(result.output)["messages"]
        expect([m["id"] for m in messages]) == [100, 102, 103, 7, 1]
        expect(messages[0]["path"]) == "Packet"
        expect(messages[0]["dependencies"]) == [102, 103]
        expect(messages[3]["fields"]) == [
            {"name": "x", "type": "int", "compatible": False},
            {"name": "y", "type": "String", "compatible": True},
        ]

    def outputs_table(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", f"{FILE_DIR}/registry.json"])
        expect(result.exit_code) == 0
        expect("Messages" in result.output) == True
        expect("Point" in result.output) == True

    def fails_with_missing_input(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "-i", "/nonexistent/registry.json"])
        expect(result.exit_code) == 1


def describe_main_group():
    def shows_help(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        expect(result.exit_code) == 0
        expect("gen" in result.output) == True
        expect("info" in result.output) == True
