from __future__ import annotations
import yaml
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
import os

from certchecker.utils.errors import ConfigError
from certchecker.utils.log import parse_level
from certchecker.utils.targets import MIN_HOSTNAME_LENGTH


@dataclass
class AppConfig:
    # logging
    log_dir: Optional[str] = None
    log_level: str = "INFO"

    # 병렬 작업자 수 (1 = 순차 실행)
    max_workers: int = 1

    # 이 길이 미만의 입력 항목은 잘못된 호스트명으로 보고 건너뜀
    min_hostname_length: int = MIN_HOSTNAME_LENGTH

    @staticmethod
    def load(path: Optional[str]) -> "AppConfig":
        if not path or not os.path.exists(path):
            return AppConfig()
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{path}: top-level mapping expected")
        return AppConfig.from_dict(raw)

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "AppConfig":
        try:
            log_dir = raw.get("log_dir")
            cfg = AppConfig(
                log_dir = str(log_dir) if log_dir else None,
                log_level = str(raw.get("log_level", "INFO")).upper(),
                max_workers = int(raw.get("max_workers", 1)),
                min_hostname_length = int(raw.get("min_hostname_length", MIN_HOSTNAME_LENGTH)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid config value: {e}") from e
        return cfg.validate()

    def validate(self) -> "AppConfig":
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be >= 1 (got {self.max_workers})")
        if self.min_hostname_length < 1:
            raise ConfigError(f"min_hostname_length must be >= 1 (got {self.min_hostname_length})")
        try:
            parse_level(self.log_level)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return self

    def to_dict(self):
        return asdict(self)
