from __future__ import annotations

"""
Extended Attribute Store.

Map-like view over a handle's extended attributes, backed by the 'attr'
tool. The key list is loaded lazily and memoized for the lifetime of the
store; writes and deletes made through the store drop the memo so the next
access re-reads it. Changes made by other processes are only observed after
such a reload.
"""

import logging
from typing import TYPE_CHECKING, Iterator, List, Optional

from fsobject.domain.config import tool_path
from fsobject.domain.errors import AttributeDeleteError, AttributeReadError, AttributeWriteError
from fsobject.infra.process import ProcessRunner, get_runner

if TYPE_CHECKING:
    from fsobject.core.handle import FSO

logger = logging.getLogger(__name__)


class AttributeStore:
    """
    Named string values attached to one filesystem entry.

    Args:
        handle: Entry whose attributes are exposed.
        runner: Process runner for the attribute tool.
    """

    def __init__(self, handle: "FSO", runner: Optional[ProcessRunner] = None) -> None:
        self.handle = handle
        self._runner = runner
        self._keys: Optional[List[str]] = None

    @property
    def runner(self) -> ProcessRunner:
        return self._runner or get_runner()

    def _attr(self, *args: str) -> List[str]:
        return [tool_path("attr"), *args, self.handle.path_abs]

    # -------------------------------------------------------------------------
    # Map API
    # -------------------------------------------------------------------------
    def keys(self) -> List[str]:
        """
        Names of the attributes set on the entry.

        Raises:
            AttributeReadError: If the listing fails.
        """
        if self._keys is None:
            result = self.runner.run(self._attr("-q", "-l"))
            result.raise_on_failure("unable-to-get-keys", AttributeReadError)
            self._keys = [k for k in result.stdout.split("\n") if k]
            logger.debug(f"{len(self._keys)} attributes on {self.handle.path_abs}")
        return list(self._keys)

    def reload(self) -> List[str]:
        """Discard the memoized key list and read it again."""
        self._keys = None
        return self.keys()

    def get(self, key: str) -> Optional[str]:
        """
        Value of 'key', or None if it is not set.

        Raises:
            AttributeReadError: If the attribute is listed but cannot be read.
        """
        if key not in self.keys():
            return None

        result = self.runner.run(self._attr("-q", "-g", key))
        result.raise_on_failure("unable-to-get-attribute", AttributeReadError)
        return result.stdout

    def set(self, key: str, value: str) -> None:
        """
        Write 'value' under 'key'.

        Raises:
            FrozenHandleError: If the handle is frozen.
            AttributeWriteError: If the write fails.
        """
        self.handle._check_frozen("set-attribute")

        result = self.runner.run(self._attr("-s", key, "-V", str(value)))
        self._keys = None
        result.raise_on_failure("unable-to-set-attribute", AttributeWriteError)

    def delete(self, key: str) -> Optional[str]:
        """
        Remove 'key' and return its previous value; None if it was not set.

        Raises:
            FrozenHandleError: If the handle is frozen.
            AttributeDeleteError: If the removal fails.
        """
        self.handle._check_frozen("delete-attribute")

        if key not in self.keys():
            return None

        rv = self.get(key)
        result = self.runner.run(self._attr("-r", key))
        self._keys = None
        result.raise_on_failure("unable-to-delete-attribute", AttributeDeleteError)
        return rv

    # -------------------------------------------------------------------------
    # Mapping protocol
    # -------------------------------------------------------------------------
    def __getitem__(self, key: str) -> Optional[str]:
        return self.get(key)

    def __setitem__(self, key: str, value: str) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        self.delete(key)

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())
