# tests/conftest.py
from pathlib import Path

import pytest
from PyQt6.QtCore import QCoreApplication

from manifest_toggler.utils.logger_utils import set_log_directory

VDF_TEMPLATE = """"libraryfolders"
{{
{entries}}}
"""

VDF_ENTRY = """\t"{index}"
\t{{
\t\t"path"\t\t"{path}"
\t\t"label"\t\t""
\t\t"contentid"\t\t"1234567890"
\t}}
"""

MANIFEST_TEMPLATE = """"AppState"
{{
{fields}\t"StateFlags"\t\t"4"
\t"installdir"\t\t"{installdir}"
}}
"""


@pytest.fixture(scope="session", autouse=True)
def _log_to_tmp(tmp_path_factory):
    set_log_directory(tmp_path_factory.mktemp("logs"))


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def write_vdf(path: Path, library_paths) -> Path:
    entries = "".join(
        VDF_ENTRY.format(index=i, path=str(p).replace("\\", "\\\\"))
        for i, p in enumerate(library_paths)
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(VDF_TEMPLATE.format(entries=entries), encoding="utf-8")
    return path


def write_manifest(steamapps: Path, appid, name=None, include_appid=True) -> Path:
    steamapps.mkdir(parents=True, exist_ok=True)
    fields = ""
    if include_appid:
        fields += f'\t"appid"\t\t"{appid}"\n'
    fields += '\t"Universe"\t\t"1"\n'
    if name is not None:
        fields += f'\t"name"\t\t"{name}"\n'
    path = steamapps / f"appmanifest_{appid}.acf"
    path.write_text(
        MANIFEST_TEMPLATE.format(fields=fields, installdir=name or appid),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def steam_root(tmp_path):
    """
    A minimal Steam root with one extra library:

        R/config/
        R/steamapps/libraryfolders.vdf   -> R, L
        R/steamapps/appmanifest_10.acf   (Alpha)
        L/steamapps/appmanifest_20.acf   (Beta)
    """
    root = tmp_path / "R"
    library = tmp_path / "L"
    (root / "config").mkdir(parents=True)
    library.mkdir()
    write_vdf(root / "steamapps" / "libraryfolders.vdf", [root, library])
    write_manifest(root / "steamapps", 10, "Alpha")
    write_manifest(library / "steamapps", 20, "Beta")
    return root
