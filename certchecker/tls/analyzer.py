from .collector import fetch_cert
from .inventory import CertificateRecord
from certchecker.utils.errors import CertCheckerError
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

log = logging.getLogger("tls_analyzer")

Fetcher = Callable[..., CertificateRecord]
Outcome = Tuple[Optional[CertificateRecord], Optional[CertCheckerError]]


@dataclass
class ScanResult:
    """배치 수집 결과: 성공 레코드 + (호스트, 오류) 목록, 둘 다 입력 순서"""
    records: List[CertificateRecord] = field(default_factory=list)
    errors: List[Tuple[str, CertCheckerError]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.records) + len(self.errors)

    @property
    def failed_hosts(self) -> List[str]:
        return [host for host, _ in self.errors]


class CertAnalyzer:
    """호스트명 목록에 대한 TLS 인증서 수집 (호출 간 공유 상태 없음)"""

    def __init__(
        self,
        max_workers: int = 1,
        fetcher: Fetcher = fetch_cert,
        logger: Optional[logging.Logger] = None,
    ):
        self.max_workers = max(1, int(max_workers))
        self.fetcher = fetcher
        self.log = logger or log

    def _check(self, hostname: str) -> Outcome:
        try:
            record = self.fetcher(hostname, logger=self.log)
        except CertCheckerError as e:
            self.log.error("hostname: %s, %s", hostname, e)
            return None, e

        self.log.info("info for: %s, %s", hostname, record)
        return record, None

    def analyze_host(self, hostname: str) -> Optional[CertificateRecord]:
        """단일 호스트 인증서 수집. 실패는 로그만 남기고 None 반환"""
        record, _ = self._check(hostname)
        return record

    def analyze_hosts(self, hostnames: Sequence[str]) -> ScanResult:
        """
        여러 호스트 수집. max_workers <= 1이면 순차 실행.
        병렬 실행 시에도 결과는 완료 순서가 아닌 입력 순서로 정렬된다.
        같은 호스트명이 여러 번 나오면 매번 따로 수집/기록한다.
        """
        outcomes: List[Outcome] = [(None, None)] * len(hostnames)

        if self.max_workers <= 1 or len(hostnames) <= 1:
            for idx, host in enumerate(hostnames):
                outcomes[idx] = self._check(host)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                future_to_idx = {
                    executor.submit(self._check, host): idx
                    for idx, host in enumerate(hostnames)
                }
                for future in as_completed(future_to_idx):
                    outcomes[future_to_idx[future]] = future.result()

        result = ScanResult()
        for host, (record, err) in zip(hostnames, outcomes):
            if record is not None:
                result.records.append(record)
            elif err is not None:
                result.errors.append((host, err))
        return result
