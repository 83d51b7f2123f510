from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from src.errors import NoteIdentityError


# PUBLIC_INTERFACE
@dataclass
class Note:
    """
    A note as it travels between the API and storage.

    Fields:
    - title: short text
    - content: large text, no length limit
    - id: None while transient; assigned once by the repository on first save
    """

    title: str
    content: str
    id: int | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id":
            current = self.__dict__.get("id")
            if current is not None and value != current:
                raise NoteIdentityError(f"Note id is already {current}; cannot change it to {value}")
        super().__setattr__(name, value)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Note:
        return cls(title=data["title"], content=data["content"], id=data.get("id"))
