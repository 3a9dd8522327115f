# certchecker/utils/log.py
"""
구조화 로깅 기본 설정
- 콘솔 출력 + (log_dir 지정 시) 파일 동시 출력
- get_logger(name) 헬퍼
"""
import logging
import os
from typing import Optional, Union

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILENAME = "certchecker.log"


def parse_level(level: Union[int, str]) -> int:
    """'debug' / 'INFO' / 10 형태를 logging 레벨 정수로 변환"""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level!r}")
    return value


def setup_logging(
    log_dir: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    fmt: str = _DEFAULT_FMT,
) -> None:
    root = logging.getLogger()
    root.setLevel(parse_level(level))

    # 중복 핸들러 방지
    for h in list(root.handlers):
        root.removeHandler(h)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(os.path.join(log_dir, LOG_FILENAME), encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt))
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter(fmt))
    root.addHandler(ch)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    lg = logging.getLogger(name)
    if level is not None:
        lg.setLevel(level)
    return lg
