"""
归档工厂与选项函数单元测试
"""

import io

import pytest

from mkself.archive import (
    MAKESELF_FORMAT,
    CompressionFormat,
    GeneratorResult,
    MakeselfArchive,
    UnsupportedFormatError,
    new_archive,
    new_archive_with_options,
    with_compression,
    with_extra_args,
    with_label,
    with_lsm_file,
    with_lsm_template,
    with_script,
    with_script_file,
)


class NullGenerator:
    def locate(self):
        return "makeself"

    def run(self, args, cwd=None, command=None):
        return GeneratorResult(0, "", "")


@pytest.fixture
def archives():
    """收集创建的归档，测试结束时丢弃以清理暂存目录"""
    created = []
    yield created
    for archive in created:
        archive.discard()


class TestOptions:
    """选项函数测试"""

    def test_options_populate_config(self, archives):
        """测试选项函数写入对应配置字段"""
        archive = new_archive_with_options(
            io.BytesIO(),
            MAKESELF_FORMAT,
            None,
            with_label("Option Label"),
            with_compression("bzip2"),
            with_lsm_template("Title: demo"),
            generator=NullGenerator(),
        )
        archives.append(archive)

        assert isinstance(archive, MakeselfArchive)
        assert archive.config.label == "Option Label"
        assert archive.config.compression is CompressionFormat.BZIP2
        assert archive.config.lsm_content == "Title: demo"

    def test_extra_args_accumulate(self, archives):
        """测试多次追加额外参数保持顺序"""
        archive = new_archive_with_options(
            io.BytesIO(),
            MAKESELF_FORMAT,
            None,
            with_extra_args("--notemp"),
            with_extra_args("--license", "LICENSE"),
            generator=NullGenerator(),
        )
        archives.append(archive)

        assert archive.config.extra_args == ("--notemp", "--license", "LICENSE")

    def test_later_option_wins(self, archives):
        """测试同一字段后设置的选项覆盖先前的值"""
        archive = new_archive_with_options(
            io.BytesIO(),
            MAKESELF_FORMAT,
            None,
            with_label("first"),
            with_label("second"),
            generator=NullGenerator(),
        )
        archives.append(archive)
        assert archive.config.label == "second"

    def test_script_options(self, tmp_path, archives):
        """测试脚本选项"""
        script_file = tmp_path / "setup.sh"
        script_file.write_text("#!/bin/sh\necho file\n")
        lsm_file = tmp_path / "a.lsm"
        lsm_file.write_text("Title: file")

        archive = new_archive_with_options(
            io.BytesIO(),
            MAKESELF_FORMAT,
            None,
            with_script("#!/bin/sh\necho inline\n"),
            with_script_file(str(script_file)),
            with_lsm_file(str(lsm_file)),
            generator=NullGenerator(),
        )
        archives.append(archive)

        staged = (archive.staging_dir / "install.sh").read_text()
        assert staged == "#!/bin/sh\necho file\n"
        assert archive.config.lsm_file == lsm_file

    def test_output_path_argument(self, tmp_path, archives):
        """测试输出路径参数"""
        output = tmp_path / "out.run"
        archive = new_archive_with_options(
            io.BytesIO(), MAKESELF_FORMAT, str(output), generator=NullGenerator()
        )
        archives.append(archive)
        assert archive.output_path == str(output)

    def test_invalid_option_value(self):
        """测试无效选项值在创建时报错"""
        with pytest.raises(ValueError):
            new_archive_with_options(io.BytesIO(), MAKESELF_FORMAT, None, with_compression("rar"))


class TestFactory:
    """按格式创建归档测试"""

    def test_makeself(self, archives):
        """测试创建 makeself 归档"""
        archive = new_archive(io.BytesIO(), MAKESELF_FORMAT, generator=NullGenerator())
        archives.append(archive)
        assert isinstance(archive, MakeselfArchive)
        assert not archive.closed

    @pytest.mark.parametrize("fmt", ["zip", "tar", "MAKESELF", ""])
    def test_unsupported_format(self, fmt):
        """测试不支持的格式"""
        with pytest.raises(UnsupportedFormatError, match="无效的归档格式"):
            new_archive(io.BytesIO(), fmt)

    def test_unsupported_format_with_options(self):
        """测试带选项时不支持的格式"""
        with pytest.raises(UnsupportedFormatError):
            new_archive_with_options(io.BytesIO(), "zip", None, with_label("x"))
