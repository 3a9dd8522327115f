# certchecker/tls/inventory.py
"""
DER 인증서 → CertificateRecord 변환
- issuer/subject DN: 인증서에 기록된 RDN 순서대로 "C=US, O=..., CN=..." 형식
- 유효기간: RFC 2822 문자열 (예: "Wed, 01 Jan 2020 00:00:00 +0000")
- subjectAltName 항목은 로그로만 출력 (반환값에 영향 없음)
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from email.utils import format_datetime
from typing import Dict, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from certchecker.utils.errors import CertParsingError
from certchecker.utils.log import get_logger

log = get_logger("tls_inventory")

# RFC 2822 연도 하한
_MIN_RFC2822_YEAR = 1900


@dataclass(frozen=True)
class CertificateRecord:
    hostname: str
    issuer: str
    subject: str
    valid_not_before: str
    valid_not_after: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


# rfc4514_string()이 약어를 모르는 속성 (그대로 두면 점 표기 OID로 출력됨)
_ATTR_NAMES = {
    NameOID.EMAIL_ADDRESS: "emailAddress",
    NameOID.SERIAL_NUMBER: "serialNumber",
    NameOID.JURISDICTION_COUNTRY_NAME: "jurisdictionC",
    NameOID.JURISDICTION_STATE_OR_PROVINCE_NAME: "jurisdictionST",
    NameOID.JURISDICTION_LOCALITY_NAME: "jurisdictionL",
    NameOID.BUSINESS_CATEGORY: "businessCategory",
    NameOID.POSTAL_CODE: "postalCode",
    NameOID.ORGANIZATION_IDENTIFIER: "organizationIdentifier",
    NameOID.GIVEN_NAME: "GN",
    NameOID.SURNAME: "SN",
    NameOID.TITLE: "title",
    NameOID.DN_QUALIFIER: "dnQualifier",
    NameOID.PSEUDONYM: "pseudonym",
}


def format_name(name: x509.Name) -> str:
    return ", ".join(rdn.rfc4514_string(_ATTR_NAMES) for rdn in name.rdns)


def format_rfc2822(dt: datetime) -> str:
    if dt.year < _MIN_RFC2822_YEAR:
        raise CertParsingError(f"timestamp {dt.isoformat()} cannot be represented as RFC 2822")
    return format_datetime(dt)


def load_certificate(der: bytes) -> x509.Certificate:
    if not der:
        raise CertParsingError("Could not convert to DER format")
    try:
        return x509.load_der_x509_certificate(der)
    except ValueError as e:
        raise CertParsingError(str(e)) from e


def log_alt_names(hostname: str, cert: x509.Certificate, logger: Optional[logging.Logger] = None) -> int:
    """
    subjectAltName 항목을 DEBUG 로그로 나열. 나열한 항목 수 반환.
    확장이 없거나 파싱이 안 되면 0 (예외를 올리지 않음).
    """
    lg = logger or log
    lg.debug(">>> %s", hostname)
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return 0
    except (ValueError, x509.DuplicateExtension, x509.UnsupportedGeneralNameType) as e:
        lg.debug("subjectAltName for %s could not be parsed: %s", hostname, e)
        return 0

    count = 0
    for name in ext.value:
        if isinstance(name, x509.DNSName):
            lg.debug("-- %s", name.value)
        else:
            lg.debug(">> %s", name.value)
        count += 1
    return count


def build_cert_record(hostname: str, der: bytes, logger: Optional[logging.Logger] = None) -> CertificateRecord:
    cert = load_certificate(der)
    try:
        issuer = format_name(cert.issuer)
        subject = format_name(cert.subject)
        not_before = cert.not_valid_before_utc
        not_after = cert.not_valid_after_utc
    except ValueError as e:
        raise CertParsingError(str(e)) from e

    record = CertificateRecord(
        hostname=hostname,
        issuer=issuer,
        subject=subject,
        valid_not_before=format_rfc2822(not_before),
        valid_not_after=format_rfc2822(not_after),
    )
    log_alt_names(hostname, cert, logger)
    return record
