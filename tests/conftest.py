import importlib.util
from pathlib import Path

import pytest

REPO = Path(__file__).resolve().parents[1]


def _load_make_pfile():
    spec = importlib.util.spec_from_file_location("make_pfile", REPO / "tools" / "make_pfile.py")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


make_pfile = _load_make_pfile()


@pytest.fixture
def pfile_builder():
    return make_pfile
