"""Payload files and numbered file groups.

A PayloadFile decodes one JSON payload into its model. A FileGroup covers a
family of numbered files in one directory (controlComponentPublicKeysPayload.1.json,
controlComponentPublicKeysPayload.2.json, ...) and yields each member's decode
outcome without stopping at the first broken file.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from evote_verifier.domain.errors.dataset import PayloadDecodeError

T = TypeVar("T", bound=BaseModel)


class PayloadFile(Generic[T]):
    """One payload file decoded into a pydantic model."""

    def __init__(self, path: Path, model: type[T]) -> None:
        self._path = path
        self._model = model

    def __repr__(self) -> str:
        return f"PayloadFile({self._path}, {self._model.__name__})"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._path.name

    def exists(self) -> bool:
        return self._path.is_file()

    def decode(self) -> T:
        """Read and decode the payload.

        Raises:
            PayloadDecodeError: If the file is missing, unreadable, not JSON,
                or does not match the model.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PayloadDecodeError(self.name, str(exc)) from exc
        try:
            return self._model.model_validate_json(text)
        except ValidationError as exc:
            raise PayloadDecodeError(
                self.name, f"{exc.error_count()} validation error(s): {_first_error(exc)}"
            ) from exc


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else str(error["msg"])


@dataclass(frozen=True)
class FileGroupEntry(Generic[T]):
    """Decode outcome of one member of a file group.

    Exactly one of payload and error is set.
    """

    index: int
    file: PayloadFile[T]
    payload: T | None = None
    error: PayloadDecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FileGroup(Generic[T]):
    """Numbered payload files sharing a prefix and suffix in one directory."""

    def __init__(self, location: Path, prefix: str, suffix: str, model: type[T]) -> None:
        self._location = location
        self._prefix = prefix
        self._suffix = suffix
        self._model = model
        self._pattern = re.compile(rf"^{re.escape(prefix)}(\d+){re.escape(suffix)}$")

    def __repr__(self) -> str:
        return f"FileGroup({self._location}, {self.file_name_pattern})"

    @property
    def location(self) -> Path:
        return self._location

    @property
    def file_name_pattern(self) -> str:
        return f"{self._prefix}{{n}}{self._suffix}"

    def file_name(self, index: int) -> str:
        return f"{self._prefix}{index}{self._suffix}"

    def get_file(self, index: int) -> PayloadFile[T]:
        return PayloadFile(self._location / self.file_name(index), self._model)

    def numbers(self) -> list[int]:
        """Indexes of the files present, ascending."""
        if not self._location.is_dir():
            return []
        found = []
        for entry in self._location.iterdir():
            match = self._pattern.match(entry.name)
            if match and entry.is_file():
                found.append(int(match.group(1)))
        return sorted(found)

    def has_elements(self) -> bool:
        return bool(self.numbers())

    def __iter__(self) -> Iterator[FileGroupEntry[T]]:
        """Yield the decode outcome of every member, ascending by index."""
        for index in self.numbers():
            file = self.get_file(index)
            try:
                yield FileGroupEntry(index=index, file=file, payload=file.decode())
            except PayloadDecodeError as exc:
                yield FileGroupEntry(index=index, file=file, error=exc)
