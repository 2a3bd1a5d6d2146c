"""
Unit tests for the ARM linker wrapper and binary generator.
"""

import pytest

from lumosbuild.build import BinaryGenerator, Linker, ProcessResult, SizeInfo
from lumosbuild.build.binary_generator import BinaryGeneratorError
from lumosbuild.build.linker import LinkerError


class TestSizeInfo:
    """Test suite for SizeInfo class."""

    def test_size_info_creation(self):
        size = SizeInfo(
            text=1000,
            data=50,
            bss=100,
            total_flash=1050,
            total_ram=150,
            max_flash=131072,
            max_ram=32768
        )

        assert size.text == 1000
        assert size.total_flash == 1050
        assert size.total_ram == 150

    def test_percentages(self):
        size = SizeInfo(
            text=65536,
            data=0,
            bss=16384,
            total_flash=65536,
            total_ram=16384,
            max_flash=131072,
            max_ram=32768
        )

        assert size.flash_percent == pytest.approx(50.0, rel=0.01)
        assert size.ram_percent == pytest.approx(50.0, rel=0.01)

    def test_percent_without_max(self):
        size = SizeInfo(text=1000, data=50, bss=100, total_flash=1050, total_ram=150)

        assert size.flash_percent is None
        assert size.ram_percent is None

    def test_parse_berkeley_output(self):
        output = """\
   text    data     bss     dec     hex filename
   1234      16    1544    2794     aea /ws/.lumos/build/firmware.elf
"""

        size = SizeInfo.parse(output, max_flash=1048576, max_ram=577536)

        assert size.text == 1234
        assert size.data == 16
        assert size.bss == 1544
        assert size.total_flash == 1250  # text + data
        assert size.total_ram == 1560    # data + bss
        assert size.max_flash == 1048576
        assert size.max_ram == 577536

    def test_parse_empty_output(self):
        size = SizeInfo.parse("")

        assert size.text == 0
        assert size.data == 0
        assert size.bss == 0
        assert size.total_flash == 0
        assert size.total_ram == 0

    def test_parse_malformed_output(self):
        size = SizeInfo.parse("garbage\nmore garbage here\n")

        assert size.text == 0
        assert size.bss == 0


class TestLinker:
    """Test suite for linking and size reporting."""

    def test_link_args(self, brain_context, mock_runner):
        objects = [brain_context.build_dir / name for name in ("startup.o", "system.o", "main.o")]

        result = Linker(brain_context, mock_runner).link(objects)

        assert result.success
        assert result.elf_path == brain_context.build_dir / "firmware.elf"
        assert result.map_path == brain_context.build_dir / "output.map"

        tool, args = mock_runner.run.call_args.args
        assert tool == brain_context.toolchain.cxx
        assert args[:3] == [str(obj) for obj in objects]
        assert args[3:5] == ["-o", str(brain_context.build_dir / "firmware.elf")]
        assert "-Wl,--gc-sections" in args
        assert "--specs=nano.specs" in args

    def test_link_failure(self, brain_context, make_runner):
        runner = make_runner(lambda tool, args: ProcessResult(
            success=False, stdout="", stderr="undefined reference to `setup'",
            exit_code=1, error="undefined reference to `setup'",
        ))

        result = Linker(brain_context, runner).link([brain_context.build_dir / "main.o"])

        assert not result.success
        assert result.elf_path is None
        assert "undefined reference" in result.stderr

    def test_size(self, brain_context, mock_runner):
        linker = Linker(brain_context, mock_runner)
        elf = brain_context.elf_path

        size_result = linker.size(elf)
        size_info = linker.get_size_info(size_result)

        tool, args = mock_runner.run.call_args.args
        assert tool == brain_context.toolchain.size
        assert args == [str(elf)]
        assert size_info is not None
        assert size_info.text == 1234
        assert size_info.max_flash == brain_context.board.max_flash
        assert size_info.max_ram == brain_context.board.max_ram

    def test_size_failure(self, brain_context, make_runner):
        runner = make_runner(lambda tool, args: ProcessResult(
            success=False, stdout="", stderr="size: no such file", exit_code=1,
        ))
        linker = Linker(brain_context, runner)

        assert linker.get_size_info(linker.size(brain_context.elf_path)) is None

    def test_linker_error_carries_stderr(self):
        error = LinkerError("Linking failed:", stderr="ld: cannot open linker script")

        assert error.stderr == "ld: cannot open linker script"


class TestBinaryGenerator:
    """Test ELF to BIN conversion."""

    def test_bin_path_for(self, brain_context):
        assert BinaryGenerator.bin_path_for(brain_context.elf_path) == (
            brain_context.build_dir / "firmware.bin"
        )

    def test_generate_bin(self, brain_context, mock_runner):
        bin_path = BinaryGenerator(brain_context, mock_runner).generate_bin(brain_context.elf_path)

        assert bin_path == brain_context.build_dir / "firmware.bin"
        tool, args = mock_runner.run.call_args.args
        assert tool == brain_context.toolchain.objcopy
        assert args == ["-O", "binary", str(brain_context.elf_path), str(bin_path)]

    def test_generate_bin_failure(self, brain_context, make_runner):
        runner = make_runner(lambda tool, args: ProcessResult(
            success=False, stdout="", stderr="objcopy: invalid bfd", exit_code=1,
            error="objcopy: invalid bfd",
        ))

        with pytest.raises(BinaryGeneratorError) as exc_info:
            BinaryGenerator(brain_context, runner).generate_bin(brain_context.elf_path)

        assert "invalid bfd" in str(exc_info.value)
