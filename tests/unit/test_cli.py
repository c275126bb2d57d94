"""
命令行接口单元测试
"""

from unittest.mock import patch

from typer.testing import CliRunner

from mkself import __version__
from mkself.cli.main import app
from mkself.config import load_config


runner = CliRunner()


class TestCli:
    """CLI 命令测试"""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_example_then_validate(self, tmp_path):
        """测试生成示例配置并验证"""
        path = tmp_path / "example.yaml"

        result = runner.invoke(app, ["example", "-o", str(path)])
        assert result.exit_code == 0, result.output
        assert load_config(path).name == "myapp"

        result = runner.invoke(app, ["validate", "-c", str(path)])
        assert result.exit_code == 0, result.output

    def test_validate_invalid(self, tmp_path):
        """测试验证失败返回非零退出码"""
        path = tmp_path / "bad.yaml"
        path.write_text("name: app\n")

        result = runner.invoke(app, ["validate", "-c", str(path)])
        assert result.exit_code == 1

        result = runner.invoke(app, ["validate", "-c", str(path), "--json"])
        assert result.exit_code == 1
        assert "error_count" in result.output

    def test_validate_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate", "-c", str(tmp_path / "none.yaml")])
        assert result.exit_code == 1

    def test_build_refuses_existing_output(self, tmp_path):
        """测试输出文件已存在且未指定 --force"""
        (tmp_path / "a.txt").write_text("a")
        config = tmp_path / "mkself.yaml"
        config.write_text("name: app\nfiles:\n  - src: a.txt\n")
        output = tmp_path / "app.run"
        output.write_text("old")

        result = runner.invoke(app, ["build", "-c", str(config), "-o", str(output)])
        assert result.exit_code == 1
        assert output.read_text() == "old"

    def test_check_missing_makeself(self):
        """测试 makeself 不可用时 check 失败"""
        with patch("mkself.archive.generator.shutil.which", return_value=None):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == 1
