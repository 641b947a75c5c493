"""Domain checks and their verbose variants."""
import io
import os

from checks import (
    checkCompiler,
    checkFunction,
    checkHeaders,
    checkHeadersVerbose,
    checkLibraries,
    checkLibrariesVerbose,
    checkProgram,
    checkProgramVerbose,
    describeHeaderCheck,
    describeLibraryCheck,
)
from conftest import fake_toolchain, recorded_commands
from reporting import Reporter


def make_reporter():
    out = io.StringIO()
    return out, Reporter(out=out, err=out)


class TestDescriptions:
    def test_single_function_no_library(self):
        assert describeLibraryCheck([], ["printf"]) == "function printf"

    def test_plural_functions_single_library(self):
        assert describeLibraryCheck(["m"], ["cos", "sin"]) == "functions cos, sin in library m"

    def test_plural_libraries(self):
        assert describeLibraryCheck(["ssl", "crypto"], ["SSL_new"]) == \
            "function SSL_new in libraries ssl, crypto"

    def test_library_only(self):
        assert describeLibraryCheck(["z"], []) == "library z"

    def test_headers(self):
        assert describeHeaderCheck(["stdint.h"]) == "header stdint.h"
        assert describeHeaderCheck(["sys/types.h", "sys/mman.h"]) == \
            "headers sys/types.h, sys/mman.h"


class TestGeneratedPrograms:
    """The fake compiler accepts anything; inspect what it was given."""

    def test_library_flags_are_appended(self, log, fake_compiler, fake_log):
        toolchain = fake_toolchain(fake_compiler, fake_log, linkFlags=["-L/opt/lib"])
        assert checkLibraries(log, toolchain, ["m", "z"], ["cos"])
        (command,) = recorded_commands(fake_log)
        assert command[-3:] == ["-L/opt/lib", "-lm", "-lz"]
        assert toolchain.linkFlags == ("-L/opt/lib",)
        assert "Found function cos in m z" in log.getvalue()

    def test_header_check_is_compile_only(self, log, fake_compiler, fake_log):
        toolchain = fake_toolchain(fake_compiler, fake_log)
        assert checkHeaders(log, toolchain, ["unistd.h"])
        (command,) = recorded_commands(fake_log)
        assert command[-1] == "-c"
        assert "Found header: unistd.h" in log.getvalue()

    def test_negative_outcome_is_logged(self, log, fake_compiler, fake_log):
        toolchain = fake_toolchain(fake_compiler, fake_log, status=1)
        assert not checkFunction(log, toolchain, "mmap", ["sys/mman.h"])
        assert "Missing function: mmap" in log.getvalue()


class TestVerbose:
    def test_header_found(self, log, fake_compiler, fake_log):
        out, reporter = make_reporter()
        toolchain = fake_toolchain(fake_compiler, fake_log)
        assert checkHeadersVerbose(log, toolchain, ["stdint.h"], reporter)
        assert out.getvalue() == "--- Checking for header stdint.h... (found)\n"

    def test_headers_not_found(self, log, fake_compiler, fake_log):
        out, reporter = make_reporter()
        toolchain = fake_toolchain(fake_compiler, fake_log, status=1)
        assert not checkHeadersVerbose(log, toolchain, ["a.h", "b.h"], reporter)
        assert out.getvalue() == "--- Checking for headers a.h, b.h... (NOT found)\n"

    def test_library_message(self, log, fake_compiler, fake_log):
        out, reporter = make_reporter()
        toolchain = fake_toolchain(fake_compiler, fake_log)
        assert checkLibrariesVerbose(log, toolchain, ["m"], ["cos", "sin"], reporter)
        assert out.getvalue() == \
            "--- Checking for functions cos, sin in library m... (found)\n"

    def test_program(self, tmp_path):
        out, reporter = make_reporter()
        assert checkProgramVerbose("no-such-tool-xyz", str(tmp_path), reporter) is None
        assert out.getvalue() == "--- Checking for program no-such-tool-xyz... (NOT found)\n"


class TestProgram:
    def test_found_in_search_path(self, tmp_path):
        bindir = tmp_path / "bin"
        bindir.mkdir()
        tool = bindir / "tool"
        tool.write_text("#!/bin/sh\n")
        os.chmod(str(tool), 0o755)

        location = checkProgram("tool", str(bindir))
        assert location
        assert os.path.samefile(location, str(tool))

    def test_first_match_wins(self, tmp_path):
        dirs = []
        for name in ("first", "second"):
            directory = tmp_path / name
            directory.mkdir()
            tool = directory / "tool"
            tool.write_text("#!/bin/sh\n")
            os.chmod(str(tool), 0o755)
            dirs.append(str(directory))
        location = checkProgram("tool", os.pathsep.join(dirs))
        assert os.path.dirname(location) == dirs[0]

    def test_not_found(self):
        assert checkProgram("definitely-not-a-real-program-xyz") is None

    def test_python_is_found(self):
        import sys
        directory, name = os.path.split(os.path.realpath(sys.executable))
        assert checkProgram(name, directory)


class TestToolchain:
    """Requires a C compiler."""

    def test_compiler_works(self, log, toolchain):
        assert checkCompiler(log, toolchain)
        assert "Compiler works" in log.getvalue()

    def test_stdio(self, log, toolchain):
        assert checkHeaders(log, toolchain, ["stdio.h"])

    def test_missing_header(self, log, toolchain):
        assert not checkHeaders(log, toolchain, ["definitely_missing_header_xyz.h"])

    def test_header_order(self, log, toolchain):
        assert checkHeaders(log, toolchain, ["stddef.h", "stdlib.h", "string.h"])

    def test_printf_in_default_runtime(self, log, toolchain):
        assert checkLibraries(log, toolchain, [], ["printf"])

    def test_nonexistent_library(self, log, toolchain):
        assert not checkLibraries(log, toolchain, ["nonexistent_lib_xyz"], ["foo"])

    def test_function_declared(self, log, toolchain):
        assert checkFunction(log, toolchain, "printf", ["stdio.h"])
        assert not checkFunction(log, toolchain, "no_such_function_xyz", ["stdio.h"])
