from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Scanner


class ScannerRepository(Protocol):
    def get_by_id(self, scanner_id: str) -> Optional[Scanner]:
        raise NotImplementedError

    def get_by_device_id(self, device_id: str) -> Optional[Scanner]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Scanner]:
        raise NotImplementedError

    def create(self, *, device_id: str, section_id: str) -> str:
        raise NotImplementedError

    def update(self, scanner_id: str, *, device_id: str, section_id: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, scanner_id: str) -> bool:
        raise NotImplementedError
