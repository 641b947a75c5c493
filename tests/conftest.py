"""
Shared pytest fixtures for the probe tests.

Two kinds of toolchains are provided:
  - "toolchain": the real C compiler found on PATH; tests using it are
    skipped when there is none.
  - "fakeCompiler": a shell script that records its arguments, creates the
    file named by "-o", copies the ".c" source to $FAKECC_KEEP if that is
    set and exits with $FAKECC_STATUS. It lets the command assembly and
    cleanup be tested without a real compiler. POSIX only.
"""
import io
import os
import sys
import textwrap
from shutil import which

import pytest

from compilers import Toolchain

FAKE_COMPILER = textwrap.dedent("""\
    #!/bin/sh
    if [ -n "$FAKECC_LOG" ]; then
        printf '%s\\n' "$*" >> "$FAKECC_LOG"
    fi
    out=
    src=
    while [ $# -gt 0 ]; do
        if [ "$1" = "-o" ]; then
            out="$2"
        fi
        case "$1" in
            *.c) src="$1" ;;
        esac
        shift
    done
    if [ -n "$out" ]; then
        : > "$out"
    fi
    if [ -n "$FAKECC_KEEP" ] && [ -n "$src" ]; then
        cp "$src" "$FAKECC_KEEP"
    fi
    exit ${FAKECC_STATUS:-0}
""")


def find_compiler():
    for name in ("cc", "gcc", "clang"):
        if which(name) is not None:
            return name
    return None


@pytest.fixture
def log():
    """In-memory probe log."""
    return io.StringIO()


@pytest.fixture
def toolchain():
    """Toolchain for the C compiler on PATH."""
    compiler = find_compiler()
    if compiler is None:
        pytest.skip("requires a C compiler")
    return Toolchain(compiler)


@pytest.fixture
def probe_dir(tmp_path):
    """Private directory for probe temporaries, so leftovers can be detected."""
    directory = tmp_path / "probes"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_compiler(tmp_path):
    """Path of the recording fake compiler script."""
    if sys.platform.startswith("win"):
        pytest.skip("fake compiler is a POSIX shell script")
    path = tmp_path / "fakecc"
    path.write_text(FAKE_COMPILER)
    os.chmod(str(path), 0o755)
    return path


@pytest.fixture
def fake_log(tmp_path):
    """File the fake compiler appends its command lines to."""
    return tmp_path / "fakecc.log"


def fake_toolchain(fake_compiler, fake_log, status=0, keep=None, **kwargs):
    env = {"FAKECC_LOG": str(fake_log), "FAKECC_STATUS": str(status)}
    if keep is not None:
        env["FAKECC_KEEP"] = str(keep)
    return Toolchain(
        str(fake_compiler),
        env=env,
        executableSuffix="",
        **kwargs
    )


def recorded_commands(fake_log):
    if not fake_log.exists():
        return []
    return [line.split() for line in fake_log.read_text().splitlines()]
