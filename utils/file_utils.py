# MIT License
#
# Copyright (c) 2018 Evgeny Medvedev, evge.medvedev@gmail.com
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import contextlib
import pathlib
import sys
from typing import IO, Any, Generator, Optional, Union


# https://stackoverflow.com/questions/17602878/how-to-handle-both-with-open-and-sys-stdout-nicely
@contextlib.contextmanager
def smart_open(
    filename: Union[str, pathlib.Path],
    mode: str = "w",
    binary: bool = False,
    create_parent_dirs: bool = True,
) -> Generator[IO[Any], None, None]:
    """
    Opens `filename`, or the standard stream matching `mode` when it is "-".

    Text mode is always UTF-8. Standard streams are never closed.
    """
    full_mode = mode + ("b" if binary else "")
    fh: Optional[IO[Any]] = None
    should_close = False

    try:
        if str(filename) == "-":
            if "w" in mode or "a" in mode:
                fh = sys.stdout.buffer if binary else sys.stdout
            else:
                fh = sys.stdin.buffer if binary else sys.stdin
        else:
            path = pathlib.Path(filename)
            if create_parent_dirs and ("w" in mode or "a" in mode):
                path.parent.mkdir(parents=True, exist_ok=True)
            fh = open(path, full_mode) if binary else open(path, full_mode, encoding="utf-8")
            should_close = True

        yield fh

    finally:
        if should_close and fh is not None:
            fh.close()
