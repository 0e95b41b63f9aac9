from __future__ import annotations

import io
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from treesplit.split import SplitEvent


class JSONLTracer:
    """Split hook appending one JSON record per :class:`SplitEvent` to ``sink``.

    Records are numbered from 1 in call order (``seq``) and carry the run's
    ``seed``, so traces of several invocations can be told apart and replayed.
    """

    def __init__(self, sink: io.TextIOBase, *, seed: Optional[int] = None):
        self.sink = sink
        self.seed = seed
        self.splits = 0

    def __call__(self, event: SplitEvent) -> None:
        self.splits += 1
        record = {"seq": self.splits, "seed": self.seed, **event.to_record()}
        self.sink.write(json.dumps(record))
        self.sink.write("\n")
        self.sink.flush()


@contextmanager
def open_trace(path: str | Path, *, seed: Optional[int] = None) -> Iterator[JSONLTracer]:
    """Yield a tracer writing to ``path``; the file is closed on exit."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as sink:
        yield JSONLTracer(sink, seed=seed)
