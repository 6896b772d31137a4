import logging

import pytest

from codeclean.cli import build_parser, main, stage_config_from_args


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_no_path_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    assert "PATH" in capsys.readouterr().err


def test_flags_map_to_stage_config():
    args = build_parser().parse_args(["src", "--no-html-comments", "--no-trim-ends"])
    cfg = stage_config_from_args(args)
    assert cfg.remove_markup_comments is False
    assert cfg.trim_file_ends is False
    assert cfg.remove_line_comments is True
    assert cfg.remove_style_comments is True
    assert args.backup is True
    assert args.verbose is True


def test_cleans_directory(tmp_path, capsys):
    (tmp_path / "a.js").write_text("a(); // x\n\n\nb();\n", encoding="utf-8")
    (tmp_path / "b.py").write_text("# untouched\n", encoding="utf-8")

    assert main([str(tmp_path)]) == 0
    assert (tmp_path / "a.js").read_text(encoding="utf-8") == "a();\nb();"
    assert (tmp_path / "a.js.backup").exists()
    assert (tmp_path / "b.py").read_text(encoding="utf-8") == "# untouched\n"
    assert "1/1" in capsys.readouterr().out


def test_no_backup_and_extensions(tmp_path):
    (tmp_path / "a.js").write_text("a(); // x\n", encoding="utf-8")
    (tmp_path / "b.css").write_text("/* c */\n.b {}\n", encoding="utf-8")

    assert main([str(tmp_path), "--no-backup", "--extensions", "css", "-q"]) == 0
    assert (tmp_path / "b.css").read_text(encoding="utf-8") == ".b {}"
    assert (tmp_path / "a.js").read_text(encoding="utf-8") == "a(); // x\n"
    assert not list(tmp_path.glob("*.backup"))


def test_keep_empty_lines(tmp_path):
    target = tmp_path / "a.ts"
    target.write_text("a();\n\n// gone\nb();\n", encoding="utf-8")

    assert main([str(target), "--no-empty-lines", "--no-backup"]) == 0
    assert target.read_text(encoding="utf-8") == "a();\n\n\nb();"


def test_failure_sets_exit_status(tmp_path):
    (tmp_path / "bin.js").write_bytes(b"\x00\x01\x02")
    assert main([str(tmp_path), "--no-verbose"]) == 1


def test_verbose_logs_each_stage(tmp_path, capsys):
    (tmp_path / "a.js").write_text("a(); // x\n\n\nb();\n", encoding="utf-8")

    assert main([str(tmp_path), "--no-backup"]) == 0
    err = capsys.readouterr().err
    assert "INFO - codeclean.transform - stage markup_comments done" in err
    assert "stage empty_lines done (5 lines -> 2 lines)" in err
    assert "stage file_ends done" in err
    assert f"directory done: {tmp_path} (1/1 files)" in err


def test_quiet_hides_stage_lines(tmp_path, capsys):
    (tmp_path / "a.js").write_text("a(); // x\n", encoding="utf-8")

    assert main([str(tmp_path), "--no-backup", "-q"]) == 0
    assert "stage" not in capsys.readouterr().err
