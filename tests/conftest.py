"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides report fixtures shared across test modules.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of gutterwatch modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("gutterwatch"):
        del sys.modules[module_name]


LCOV_REPORT = """\
TN:
SF:src/app.py
DA:1,1
DA:2,1
DA:3,0
DA:4,2
BRDA:4,0,0,1
BRDA:4,0,1,0
end_of_record
SF:src/util.py
DA:1,1
DA:2,1
end_of_record
"""

COBERTURA_REPORT = """\
<?xml version="1.0" ?>
<coverage version="7.4" line-rate="0.5" branch-rate="0.5" timestamp="1">
  <sources><source>/work</source></sources>
  <packages>
    <package name="src">
      <classes>
        <class name="app.py" filename="src/app.py" line-rate="0.5">
          <lines>
            <line number="1" hits="0"/>
            <line number="3" hits="5"/>
            <line number="4" hits="1" branch="true" condition-coverage="100% (2/2)"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>
"""


@pytest.fixture
def lcov_report() -> str:
    return LCOV_REPORT


@pytest.fixture
def cobertura_report() -> str:
    return COBERTURA_REPORT


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with two sources and an LCOV report under coverage/."""
    root = tmp_path / "ws"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.py").write_text("a = 1\n")
    (root / "src" / "util.py").write_text("b = 2\n")
    (root / "coverage").mkdir()
    (root / "coverage" / "lcov.info").write_text(LCOV_REPORT)
    return root
