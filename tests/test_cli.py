"""命令行向导测试"""

from click.testing import CliRunner

from scripts.generate_book import main


def test_runs_wizard_with_templates(tmp_path):
    preview = tmp_path / "book.html"
    result = CliRunner().invoke(main, [
        "-t", "Focused Living", "-a", "Sam Rivera", "-i", "Building focus.",
        "--depth", "outline", "--preview", str(preview),
    ])

    assert result.exit_code == 0, result.output
    assert "目录已生成（3章）" in result.output
    assert "章节已生成：3/3" in result.output
    assert "Focused Living" in preview.read_text(encoding="utf-8")


def test_pdf_and_cover_failures_are_reported():
    result = CliRunner().invoke(main, [
        "-t", "T", "-a", "A", "-i", "Idea", "--pdf", "--cover",
    ])

    assert result.exit_code == 0
    assert "PDF导出失败" in result.output
    assert "封面生成失败" in result.output


def test_rejects_unknown_depth():
    result = CliRunner().invoke(main, ["-t", "T", "-a", "A", "-i", "I", "--depth", "epic"])
    assert result.exit_code == 2
