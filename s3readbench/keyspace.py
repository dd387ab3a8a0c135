"""Key space — the finite set of object keys a run samples from."""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator

from s3readbench.exceptions import EmptyKeySpaceError


class KeySpace:
    """Immutable collection of object keys with uniform random draw.

    Draws are with replacement: the same key may come up on many
    iterations, which keeps the access pattern cache-unfriendly.
    """

    __slots__ = ("_keys",)

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys: tuple[str, ...] = tuple(keys)

    def size(self) -> int:
        """Number of keys in the space."""
        return len(self._keys)

    def random_key(self, rng: random.Random | None = None) -> str:
        """Draw one key uniformly at random.

        Args:
            rng: Random source. Defaults to the ``random`` module's
                shared generator; pass a seeded ``random.Random`` for
                reproducible sequences.

        Raises:
            EmptyKeySpaceError: If the space holds no keys.
        """
        if not self._keys:
            raise EmptyKeySpaceError("Cannot draw a key from an empty key space")
        randrange = rng.randrange if rng is not None else random.randrange
        return self._keys[randrange(len(self._keys))]

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __repr__(self) -> str:
        return f"KeySpace(size={len(self._keys)})"
