# SPDX-License-Identifier: MIT
"""Shared fixtures for orcabuild tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# A stand-in C compiler. It answers the version probes like clang, records
# its arguments, writes a fixed-size file to the -o path (unless
# $FAKE_CC_NO_OUTPUT is set), and exits with $FAKE_CC_EXIT.
FAKE_COMPILER = """\
#!{python}
import json
import os
import sys

args = sys.argv[1:]
if args == ["--version"]:
    print("clang version 17.0.6")
    print("Target: x86_64-pc-linux-gnu")
    sys.exit(0)
if args == ["-dumpfullversion"]:
    sys.exit(1)

log = os.environ.get("FAKE_CC_LOG")
if log:
    with open(log, "w") as f:
        json.dump(args, f)

status = int(os.environ.get("FAKE_CC_EXIT", "0"))
if status == 0 and "-o" in args and not os.environ.get("FAKE_CC_NO_OUTPUT"):
    with open(args[args.index("-o") + 1], "wb") as f:
        f.write(b"\\0" * 4096)
sys.exit(status)
"""


@pytest.fixture
def fake_compiler(tmp_path: Path) -> Path:
    """Path to an executable fake compiler script."""
    if sys.platform == "win32":
        pytest.skip("fake compiler needs a POSIX shebang")
    script = tmp_path / "fake-cc"
    script.write_text(FAKE_COMPILER.format(python=sys.executable))
    script.chmod(0o755)
    return script
