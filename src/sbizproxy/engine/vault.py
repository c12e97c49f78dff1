"""
CredentialVault: 소상공인365 OpenAPI 서브 API 이름 -> certKey 매핑.

프로세스 시작 시 설정(SBIZ_OPEN_API_KEYS)에서 한 번 로드되며 이후 읽기 전용입니다.
"""

from functools import lru_cache
from types import MappingProxyType
from typing import List, Mapping

from sbizproxy.shared.config import settings
from sbizproxy.shared.errors import CredentialMissing


class CredentialVault:
    def __init__(self, credentials: Mapping[str, str]):
        self._credentials = MappingProxyType(
            {name: key for name, key in credentials.items() if key}
        )

    def names(self) -> List[str]:
        return sorted(self._credentials)

    def lookup(self, name: str) -> str:
        key = self._credentials.get(name) if name else None
        if key is None:
            raise CredentialMissing(name, self.names())
        return key

    def __contains__(self, name: str) -> bool:
        return name in self._credentials

    def __repr__(self) -> str:
        # 값은 절대 노출하지 않음
        return f"CredentialVault(names={self.names()})"


@lru_cache(maxsize=1)
def get_vault() -> CredentialVault:
    return CredentialVault(settings.SBIZ_OPEN_API_KEYS)
