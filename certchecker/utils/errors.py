# certchecker/utils/errors.py
class CertCheckerError(Exception):
    """인증서 점검 예외 베이스 (단계별 하위 클래스로 구분)"""

    label = "Cert Checker Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class ContextError(CertCheckerError):
    """TLS 컨텍스트/세션 객체 생성 실패 (네트워크 이전 단계)"""

    label = "Context Error"


class AddressParsingError(CertCheckerError):
    """호스트명 → 소켓 주소 해석 실패"""

    label = "Address Parsing Error"


class ConnectError(CertCheckerError):
    """TCP 연결 실패/타임아웃"""

    label = "Connection Error"


class TlsHandshakeError(CertCheckerError):
    """TCP 연결 이후 TLS 협상 실패"""

    label = "TLS Handshake Error"


class CertParsingError(CertCheckerError):
    """피어 인증서 없음, DER 파싱 실패, 필드 포맷 실패"""

    label = "Certificate Parsing Error"


class ConfigError(CertCheckerError):
    """설정 관련 오류"""

    label = "Config Error"
