"""Standard probe definitions."""
from probe_defs import (
    MMapFunction,
    SysMManHeader,
    programs,
    systemFunctions,
    systemHeaders,
    systemLibraries,
)


def test_discovery():
    assert [header.name for header in systemHeaders] == \
        ["dlfcn.h", "stdint.h", "sys/mman.h", "unistd.h"]
    assert MMapFunction in systemFunctions
    assert [library.libName for library in systemLibraries] == ["dl", "m", "pthread", "z"]
    assert [program.name for program in programs] == ["ar", "make", "pkg-config"]


def test_make_names():
    assert SysMManHeader.getMakeName() == "SYS_MMAN_H"
    assert MMapFunction.getMakeName() == "MMAP"
    assert systemLibraries[1].getMakeName() == "LIBM"
    assert programs[2].getMakeName() == "PKG_CONFIG"


def test_platform_specific_headers():
    assert list(MMapFunction.iterHeaders("linux")) == ["sys/mman.h"]
    assert list(MMapFunction.iterHeaders("darwin")) == ["sys/types.h", "sys/mman.h"]
    assert list(SysMManHeader.iterHeaders("openbsd")) == ["sys/types.h", "sys/mman.h"]


def test_every_function_names_headers():
    for func in systemFunctions:
        assert list(func.iterHeaders("linux")), func.name
