# certchecker/utils/net.py
"""
네트워크 유틸
- 호스트 해석: getaddrinfo 결과 중 첫 번째 주소만 사용 (대체 주소 재시도 없음)
- TCP 연결: 고정 타임아웃, 실패 시 소켓 정리
"""
from __future__ import annotations
import socket
from typing import Any, Tuple

from .errors import AddressParsingError, ConnectError

SockAddr = Tuple[Any, ...]


def resolve_address(host: str, port: int) -> Tuple[int, SockAddr]:
    """
    (host, port)를 (address family, sockaddr)로 해석.
    여러 후보가 나와도 첫 번째만 반환한다.
    """
    if not host:
        raise AddressParsingError("empty hostname")
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except socket.gaierror as e:
        raise AddressParsingError(f"{host}:{port}: {e}") from e
    except UnicodeError as e:
        # IDNA 인코딩 불가 (빈 라벨, 너무 긴 라벨 등)
        raise AddressParsingError(f"{host}:{port}: invalid hostname ({e})") from e
    if not infos:
        raise AddressParsingError(f"{host}:{port}: no addresses returned")
    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


def open_connection(family: int, sockaddr: SockAddr, timeout: float) -> socket.socket:
    """
    지정 주소로 TCP 연결. timeout은 이후 소켓 연산(핸드셰이크 포함)에도 그대로 적용된다.
    """
    try:
        sock = socket.socket(family, socket.SOCK_STREAM)
    except OSError as e:
        raise ConnectError(f"socket creation failed: {e}") from e
    try:
        sock.settimeout(timeout)
        sock.connect(sockaddr)
    except OSError as e:
        sock.close()
        if isinstance(e, socket.timeout):
            raise ConnectError(f"connection to {_fmt(sockaddr)} timed out") from e
        raise ConnectError(f"{_fmt(sockaddr)}: {e}") from e
    return sock


def _fmt(sockaddr: SockAddr) -> str:
    host, port = sockaddr[0], sockaddr[1]
    if ":" in str(host):
        return f"[{host}]:{port}"
    return f"{host}:{port}"
