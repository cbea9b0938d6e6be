"""
Unit tests for command.py
"""

import re
from datetime import datetime

import pytest

from mysql_assistant.command import build_command, resolve_export_path, timestamp
from mysql_assistant.config import AnswerSet

NOW = datetime(2024, 5, 1, 12, 0, 0)


def answers(**overrides):
    data = {
        "type": "export",
        "user": "root",
        "host": "localhost",
        "database": "shop",
        "path": "~/Desktop/",
    }
    data.update(overrides)
    return AnswerSet.model_validate(data)


class TestTimestamp:
    def test_zero_padded(self):
        assert timestamp(datetime(2024, 1, 2, 3, 4, 5)) == "20240102-030405"

    def test_shape(self):
        assert re.fullmatch(r"\d{8}-\d{6}", timestamp())


class TestResolveExportPath:
    def test_directory_with_slash(self):
        assert resolve_export_path("~/Desktop/", "shop", NOW) == "~/Desktop/shop_20240501-120000.sql"

    def test_directory_without_slash(self):
        assert resolve_export_path("/backups", "shop", NOW) == "/backups/shop_20240501-120000.sql"

    def test_explicit_file_unchanged(self):
        assert resolve_export_path("/backups/full.sql", "shop", NOW) == "/backups/full.sql"

    def test_single_suffix(self):
        path = resolve_export_path("/backups/", "shop")
        assert path.count(".sql") == 1
        assert re.fullmatch(r"/backups/shop_\d{8}-\d{6}\.sql", path)

    def test_resolving_twice_is_stable(self):
        once = resolve_export_path("/backups/", "shop", NOW)
        assert resolve_export_path(once, "shop") == once


class TestBuildCommand:
    def test_export_example(self):
        command = build_command(answers(), NOW)
        assert command.path == "~/Desktop/shop_20240501-120000.sql"
        assert str(command) == (
            "mysqldump -u root -h localhost --single-transaction shop "
            "> ~/Desktop/shop_20240501-120000.sql"
        )

    def test_import(self):
        command = build_command(answers(type="import", path="/data/shop.sql"))
        assert command.argv == ["mysql", "-u", "root", "-h", "localhost", "shop"]
        assert str(command) == "mysql -u root -h localhost shop < /data/shop.sql"

    @pytest.mark.parametrize("op,redirect", [("import", "<"), ("export", ">")])
    def test_redirect_precedes_path(self, op, redirect):
        command = build_command(answers(type=op, path="/data/dump.sql"), NOW)
        tokens = command.tokens()
        assert tokens[-1] == "/data/dump.sql"
        assert tokens[-2] == redirect

    def test_password_is_attached(self):
        command = build_command(answers(password="s3cret"), NOW)
        assert command.argv[:5] == ["mysqldump", "-u", "root", "-ps3cret", "-h"]
        assert "s3cret" not in command.masked()
        assert "-p****" in command.masked()

    def test_empty_password_omitted(self):
        command = build_command(answers(password=""), NOW)
        assert not any(t.startswith("-p") for t in command.argv)

    def test_tables_are_separate_arguments(self):
        command = build_command(answers(table="orders  customers"), NOW)
        assert command.argv[-3:] == ["shop", "orders", "customers"]

    def test_tables_ignored_for_import(self):
        command = build_command(answers(type="import", path="/d.sql", table="orders"))
        assert command.argv[-1] == "shop"

    def test_same_answers_same_command(self):
        a = answers(table="orders", password="pw")
        assert build_command(a, NOW) == build_command(a, NOW)
        assert str(build_command(a, NOW)) == str(build_command(a, NOW))

    def test_unsafe_tokens_are_quoted(self):
        command = build_command(answers(path="/my dumps/it's.sql"), NOW)
        assert str(command).endswith("> '/my dumps/it'\"'\"'s.sql'")

    @pytest.mark.parametrize("op,redirect", [("import", "<"), ("export", ">")])
    def test_redirect_is_not_quoted(self, op, redirect):
        command = build_command(answers(type=op, path="/data/dump.sql"), NOW)
        assert f" {redirect} /data/dump.sql" in str(command)
        assert f"'{redirect}'" not in str(command)

    def test_masked_keeps_shell_shape(self):
        command = build_command(answers(password="s3cret", path="/data/dump.sql"), NOW)
        assert command.masked() == (
            "mysqldump -u root -p**** -h localhost --single-transaction shop > /data/dump.sql"
        )
