# certchecker/utils/targets.py
"""
호스트명 목록 입력 유틸
- 한 줄에 하나의 도메인/호스트명
- 앞뒤 공백 제거, 빈 줄 무시
- 너무 짧은 항목(기본 3자 이하)은 경고 후 건너뜀
"""
from __future__ import annotations
import logging
from typing import Iterable, Iterator, List, Optional

from .log import get_logger

MIN_HOSTNAME_LENGTH = 4

log = get_logger("targets")


def iter_hostnames(
    lines: Iterable[str],
    *,
    min_length: int = MIN_HOSTNAME_LENGTH,
    logger: Optional[logging.Logger] = None,
) -> Iterator[str]:
    lg = logger or log
    for line in lines:
        entry = line.strip()
        if not entry:
            continue
        if len(entry) < min_length:
            lg.warning("potentially malformed hostname: %s", entry)
            continue
        lg.info("hostname %s read from input", entry)
        yield entry


def read_hostnames(
    path: str,
    *,
    min_length: int = MIN_HOSTNAME_LENGTH,
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    입력 파일에서 호스트명 목록을 읽는다. 중복은 제거하지 않는다(입력 순서 유지).
    파일 열기 실패는 OSError 그대로 호출자에게 전달.
    """
    with open(path, "r", encoding="utf-8") as f:
        return list(iter_hostnames(f, min_length=min_length, logger=logger))
