from __future__ import annotations

from typing import Iterable

from blinker import Namespace

_signals = Namespace()

#: Sent with ``paths=[...]`` after a mutation so cached views can be dropped.
views_invalidated = _signals.signal("views-invalidated")


def revalidate(sender: str, paths: Iterable[str]) -> list[str]:
    unique = sorted(set(paths))
    if unique:
        views_invalidated.send(sender, paths=unique)
    return unique
