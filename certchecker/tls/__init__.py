from .collector import fetch_cert, build_context, DEFAULT_PORT, TIMEOUT_SECONDS
from .inventory import CertificateRecord, build_cert_record
from .analyzer import CertAnalyzer, ScanResult
