# certchecker/tls/collector.py
"""
단일 호스트 TLS 서버 인증서 수집
context → resolve → connect → handshake → extract → decode 순서로 진행하며,
어느 단계든 실패하면 해당 단계의 CertCheckerError 하위 예외를 올린다(부분 결과 없음).
"""
from __future__ import annotations
import logging
import socket
import ssl
from typing import Optional

from certchecker.tls.inventory import CertificateRecord, build_cert_record
from certchecker.utils.errors import (
    CertParsingError,
    ContextError,
    TlsHandshakeError,
)
from certchecker.utils.log import get_logger
from certchecker.utils.net import open_connection, resolve_address

DEFAULT_PORT = 443
TIMEOUT_SECONDS = 5.0

log = get_logger("tls_collector")


def build_context() -> ssl.SSLContext:
    """
    클라이언트 TLS 컨텍스트.
    제시된 인증서를 그대로 들여다보는 것이 목적이므로 체인/호스트명 검증을 끈다.
    (만료, 자체 서명, 신뢰되지 않은 인증서도 수집 대상)
    """
    try:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        # check_hostname을 먼저 꺼야 CERT_NONE 설정이 허용된다
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    except (ssl.SSLError, ValueError) as e:
        raise ContextError(str(e)) from e
    return ctx


def _shutdown(tls: ssl.SSLSocket, hostname: str, lg: logging.Logger) -> None:
    # close_notify만 보내고 상대방의 close_notify는 기다리지 않는다
    try:
        tls.setblocking(False)
        tls.unwrap()
    except ssl.SSLWantReadError:
        pass
    except (ssl.SSLError, OSError) as e:
        lg.warning("TLS shutdown for %s was not clean: %s", hostname, e)


def fetch_cert(hostname: str, *, logger: Optional[logging.Logger] = None) -> CertificateRecord:
    lg = logger or log
    ctx = build_context()
    family, sockaddr = resolve_address(hostname, DEFAULT_PORT)

    with open_connection(family, sockaddr, TIMEOUT_SECONDS) as sock:
        try:
            tls = ctx.wrap_socket(sock, server_hostname=hostname, do_handshake_on_connect=False)
        except (ssl.SSLError, ValueError) as e:
            raise ContextError(f"could not create TLS session for {hostname}: {e}") from e

        with tls:
            try:
                tls.do_handshake()
            except (ssl.SSLError, OSError) as e:
                raise TlsHandshakeError(str(e) or type(e).__name__) from e

            der = tls.getpeercert(binary_form=True)
            if not der:
                raise CertParsingError("Could not convert to DER format")

            record = build_cert_record(hostname, der, lg)
            _shutdown(tls, hostname, lg)

    return record

