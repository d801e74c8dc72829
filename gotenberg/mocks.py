"""Configurable stand-ins for the module interfaces, for use in tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class ModuleMock:
    descriptor_mock: Optional[Callable[[], Any]] = None

    def descriptor(self) -> Any:
        return self.descriptor_mock()


@dataclass
class ProvisionerMock:
    provision_mock: Optional[Callable[[Any], None]] = None

    def provision(self, ctx: Any) -> None:
        self.provision_mock(ctx)


@dataclass
class ValidatorMock:
    validate_mock: Optional[Callable[[], None]] = None

    def validate(self) -> None:
        self.validate_mock()


@dataclass
class DebuggableMock:
    debug_mock: Optional[Callable[[], dict]] = None

    def debug(self) -> dict:
        return self.debug_mock()


@dataclass
class PdfEngineMock:
    merge_mock: Optional[Callable[..., None]] = None
    split_mock: Optional[Callable[..., list]] = None
    flatten_mock: Optional[Callable[..., None]] = None
    convert_mock: Optional[Callable[..., None]] = None
    read_metadata_mock: Optional[Callable[..., dict]] = None
    write_metadata_mock: Optional[Callable[..., None]] = None

    def merge(self, logger: Any, input_paths: list, output_path: str) -> None:
        self.merge_mock(logger, input_paths, output_path)

    def split(self, logger: Any, mode: Any, input_path: str, output_dir_path: str) -> list:
        return self.split_mock(logger, mode, input_path, output_dir_path)

    def flatten(self, logger: Any, input_path: str) -> None:
        self.flatten_mock(logger, input_path)

    def convert(self, logger: Any, formats: Any, input_path: str, output_path: str) -> None:
        self.convert_mock(logger, formats, input_path, output_path)

    def read_metadata(self, logger: Any, input_path: str) -> dict:
        return self.read_metadata_mock(logger, input_path)

    def write_metadata(self, logger: Any, metadata: dict, input_path: str) -> None:
        self.write_metadata_mock(logger, metadata, input_path)


@dataclass
class PdfEngineProviderMock:
    pdf_engine_mock: Optional[Callable[[], Any]] = None

    def pdf_engine(self) -> Any:
        return self.pdf_engine_mock()


@dataclass
class ProcessMock:
    start_mock: Optional[Callable[[Any], None]] = None
    stop_mock: Optional[Callable[[Any], None]] = None
    healthy_mock: Optional[Callable[[Any], bool]] = None

    def start(self, logger: Any) -> None:
        self.start_mock(logger)

    def stop(self, logger: Any) -> None:
        self.stop_mock(logger)

    def healthy(self, logger: Any) -> bool:
        return self.healthy_mock(logger)


@dataclass
class ProcessSupervisorMock:
    launch_mock: Optional[Callable[[], None]] = None
    shutdown_mock: Optional[Callable[[], None]] = None
    healthy_mock: Optional[Callable[[], bool]] = None
    run_mock: Optional[Callable[..., Any]] = None
    req_queue_size_mock: Optional[Callable[[], int]] = None
    restarts_count_mock: Optional[Callable[[], int]] = None

    def launch(self) -> None:
        self.launch_mock()

    def shutdown(self) -> None:
        self.shutdown_mock()

    def healthy(self) -> bool:
        return self.healthy_mock()

    def run(self, logger: Any, task: Callable[[], Any], timeout: float | None = None) -> Any:
        return self.run_mock(logger, task, timeout)

    def req_queue_size(self) -> int:
        return self.req_queue_size_mock()

    def restarts_count(self) -> int:
        return self.restarts_count_mock()


@dataclass
class LoggerProviderMock:
    logger_mock: Optional[Callable[[Any], Any]] = None

    def logger(self, mod: Any) -> Any:
        return self.logger_mock(mod)


@dataclass
class MetricsProviderMock:
    metrics_mock: Optional[Callable[[], list]] = None

    def metrics(self) -> list:
        return self.metrics_mock()