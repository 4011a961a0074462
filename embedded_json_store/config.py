from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional, Union

from .errors import StoreConfigError


@dataclass
class StoreConfig:
    """
    Everything a store needs, fixed at construction time.

    path:              the backing *.json file
    record_type:       dataclass every record is an instance of
    id_key:            optional identifier field; blank means "not configured"
    create_if_missing: create an empty file (and parent dirs) when absent
    indent:            pretty-print the file with this indent; compact if None
    """

    path: Union[str, "os.PathLike[str]"]
    record_type: Optional[type] = None
    id_key: Optional[str] = None
    create_if_missing: bool = False
    indent: Optional[int] = None

    def validate(self) -> None:
        if self.path is None or not os.fspath(self.path).strip():
            raise StoreConfigError("path cannot be empty", operation="open")
        if self.record_type is None:
            raise StoreConfigError("record_type cannot be None", operation="open")
        if self.indent is not None and (not isinstance(self.indent, int) or self.indent < 0):
            raise StoreConfigError(f"indent must be a non-negative int, got {self.indent!r}", operation="open")

    @property
    def identifier(self) -> Optional[str]:
        if self.id_key is None or not self.id_key.strip():
            return None
        return self.id_key
