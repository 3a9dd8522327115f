"""
Shared fixtures: throwaway self-signed certificate and loopback servers.

The fetcher always targets DEFAULT_PORT; tests redirect it to the ephemeral
port of a local server by patching the collector module constant.
"""
import datetime
import ipaddress
import logging
import socket
import ssl
import threading

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from certchecker.tls import collector

NOT_BEFORE = datetime.datetime(2020, 1, 1, 0, 0, 0, tzinfo=datetime.timezone.utc)
NOT_AFTER = datetime.datetime(2040, 6, 30, 12, 30, 45, tzinfo=datetime.timezone.utc)


def make_certificate(common_name="localhost", not_before=NOT_BEFORE, not_after=NOT_AFTER, san=True, issuer_alt=False):
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example, Inc"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
    )
    if san:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([
                x509.DNSName("localhost"),
                x509.DNSName("www.example.test"),
                x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
            ]),
            critical=False,
        )
    if issuer_alt:
        builder = builder.add_extension(
            x509.IssuerAlternativeName([x509.DNSName("ca.example.test")]),
            critical=False,
        )
    cert = builder.sign(key, hashes.SHA256())
    return cert, key


def duplicate_san_der():
    """DER whose issuerAltName OID is rewritten to subjectAltName, giving two SAN extensions."""
    cert, _ = make_certificate(issuer_alt=True)
    der = cert.public_bytes(serialization.Encoding.DER)
    ian_oid = b"\x06\x03\x55\x1d\x12"
    assert der.count(ian_oid) == 1
    return der.replace(ian_oid, b"\x06\x03\x55\x1d\x11")


@pytest.fixture(scope="session")
def certificate():
    return make_certificate()


@pytest.fixture(scope="session")
def cert_files(certificate, tmp_path_factory):
    cert, key = certificate
    d = tmp_path_factory.mktemp("pki")
    cert_path = d / "cert.pem"
    key_path = d / "key.pem"
    cert_path.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return str(cert_path), str(key_path)


class _LoopbackServer(threading.Thread):
    """Accepts connections on 127.0.0.1 until closed; handle() serves each one."""

    def __init__(self):
        super().__init__(daemon=True)
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(5)
        self.sock.settimeout(0.2)
        self.port = self.sock.getsockname()[1]
        self.accepted = 0
        self._closing = threading.Event()

    def run(self):
        while not self._closing.is_set():
            try:
                conn, _ = self.sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            self.accepted += 1
            conn.settimeout(5)
            try:
                self.handle(conn)
            except (ssl.SSLError, OSError):
                pass
            finally:
                conn.close()

    def handle(self, conn):
        raise NotImplementedError

    def close(self):
        self._closing.set()
        self.join(timeout=5)
        self.sock.close()


class TLSServer(_LoopbackServer):
    def __init__(self, cert_path, key_path):
        super().__init__()
        self.ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        self.ctx.load_cert_chain(cert_path, key_path)

    def handle(self, conn):
        with self.ctx.wrap_socket(conn, server_side=True) as tls:
            try:
                tls.unwrap()
            except (ssl.SSLError, OSError):
                pass


class PlainServer(_LoopbackServer):
    """Speaks something that is not TLS, then waits for the client to hang up."""

    def __init__(self):
        super().__init__()
        self.client_closed = threading.Event()

    def handle(self, conn):
        conn.recv(4096)
        conn.sendall(b"HTTP/1.0 400 Bad Request\r\nContent-Length: 0\r\n\r\n")
        while True:
            try:
                data = conn.recv(4096)
            except ConnectionResetError:
                data = b""
            if not data:
                self.client_closed.set()
                return


class QuietTLSServer(TLSServer):
    """Completes the handshake, then never sends close_notify until the client hangs up."""

    def handle(self, conn):
        with self.ctx.wrap_socket(conn, server_side=True) as tls:
            while tls.recv(4096):
                pass


class SilentServer(_LoopbackServer):
    """Accepts TCP and never answers the ClientHello."""

    def handle(self, conn):
        while conn.recv(4096):
            pass


@pytest.fixture
def tls_server(cert_files, monkeypatch):
    server = TLSServer(*cert_files)
    server.start()
    monkeypatch.setattr(collector, "DEFAULT_PORT", server.port)
    yield server
    server.close()


@pytest.fixture
def plain_server(monkeypatch):
    server = PlainServer()
    server.start()
    monkeypatch.setattr(collector, "DEFAULT_PORT", server.port)
    yield server
    server.close()


@pytest.fixture
def quiet_tls_server(cert_files, monkeypatch):
    server = QuietTLSServer(*cert_files)
    server.start()
    monkeypatch.setattr(collector, "DEFAULT_PORT", server.port)
    yield server
    server.close()


@pytest.fixture
def silent_server(monkeypatch):
    server = SilentServer()
    server.start()
    monkeypatch.setattr(collector, "DEFAULT_PORT", server.port)
    yield server
    server.close()


@pytest.fixture
def refused_port(monkeypatch):
    # bound but never listening: connects get RST
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    monkeypatch.setattr(collector, "DEFAULT_PORT", port)
    yield port
    s.close()


@pytest.fixture
def test_logger():
    lg = logging.getLogger("certchecker.tests")
    lg.setLevel(logging.DEBUG)
    return lg


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
