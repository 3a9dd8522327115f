from .errors import (
    CertCheckerError, ContextError, AddressParsingError, ConnectError,
    TlsHandshakeError, CertParsingError, ConfigError
)
from .log import setup_logging, get_logger, parse_level
from .net import resolve_address, open_connection
from .targets import iter_hostnames, read_hostnames, MIN_HOSTNAME_LENGTH
