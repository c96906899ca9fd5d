"""Tests for the end-to-end download pipeline, with an in-memory downloader."""

from datetime import datetime, timezone

import pytest
from conftest import FakeDownloader
from pydantic import ValidationError

from goesctl.errors import DirectoryError, InvalidDurationError, WindowValidationError
from goesctl.pipeline import PipelineConfig, run_pipeline
from goesctl.sources import GOESImagery


@pytest.fixture
def imagery():
    return GOESImagery()


class TestRunPipeline:
    def test_scenario(self, root_dir, now, imagery, fake_downloader):
        config = PipelineConfig(start="2024-11-30T08:00:00Z", duration="20m", stride_minutes=10, root=root_dir)
        report = run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now)

        directory = root_dir / "images_20241130T080000_to_20241130T082000_stride_10m"
        assert report.directory == directory
        assert [o.timestamp for o in report.outcomes] == [
            datetime(2024, 11, 30, 8, 0, tzinfo=timezone.utc),
            datetime(2024, 11, 30, 8, 10, tzinfo=timezone.utc),
            datetime(2024, 11, 30, 8, 20, tzinfo=timezone.utc),
        ]
        assert [o.path for o in report.saved] == [
            directory / "20241130T080000.jpg",
            directory / "20241130T081000.jpg",
            directory / "20241130T082000.jpg",
        ]
        assert all(p.read_bytes() == fake_downloader.payload for p in directory.iterdir())
        assert fake_downloader.initialized and fake_downloader.closed

    def test_ago_with_default_end(self, root_dir, now, imagery, fake_downloader):
        config = PipelineConfig(ago="1h", stride_minutes=20, root=root_dir, max_concurrency=2)
        report = run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now)

        # 10:25 - 1h = 09:25 -> 09:20, end 10:20
        assert [o.timestamp.strftime("%H:%M") for o in report.outcomes] == ["09:20", "09:40", "10:00", "10:20"]
        assert len(fake_downloader.calls) == 4

    def test_partial_failure(self, root_dir, now, imagery):
        downloader = FakeDownloader(failing={"20241130T081000"})
        config = PipelineConfig(start="2024-11-30T08:00:00Z", duration="20m", root=root_dir)
        report = run_pipeline(config, imagery=imagery, downloader=downloader, now=now)

        assert len(report.saved) == 2
        assert len(report.failed) == 1
        failure = report.failed[0]
        assert failure.timestamp == datetime(2024, 11, 30, 8, 10, tzinfo=timezone.utc)
        assert failure.reason.startswith("fetch failed: HTTP 404")
        assert downloader.closed

    def test_root_missing(self, tmp_path, now, imagery, fake_downloader):
        config = PipelineConfig(ago="1h", root=tmp_path / "missing")
        with pytest.raises(DirectoryError) as exc_info:
            run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now)
        assert exc_info.value.reason == "root missing"
        assert fake_downloader.calls == []
        assert not fake_downloader.initialized

    def test_directory_already_exists(self, root_dir, now, imagery, fake_downloader):
        (root_dir / "images_20241130T080000_to_20241130T082000_stride_10m").mkdir()
        config = PipelineConfig(start="2024-11-30T08:00:00Z", duration="20m", root=root_dir)
        with pytest.raises(DirectoryError) as exc_info:
            run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now)
        assert exc_info.value.reason == "already exists"
        assert fake_downloader.calls == []

    def test_invalid_window(self, root_dir, now, imagery, fake_downloader):
        config = PipelineConfig(start="2024-11-30T08:00:00Z", ago="1h", root=root_dir)
        with pytest.raises(WindowValidationError):
            run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now)
        assert list(root_dir.iterdir()) == []
        assert fake_downloader.calls == []

    def test_invalid_duration(self, root_dir, now, imagery, fake_downloader):
        config = PipelineConfig(ago="1h", duration="25m", root=root_dir)
        with pytest.raises(InvalidDurationError):
            run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now)
        assert list(root_dir.iterdir()) == []

    def test_write_failure_is_isolated(self, root_dir, now, imagery, fake_downloader):
        def flaky_writer(path, data):
            if path.stem == "20241130T080000":
                raise PermissionError("read-only")
            path.write_bytes(data)

        config = PipelineConfig(start="2024-11-30T08:00:00Z", duration="20m", root=root_dir)
        report = run_pipeline(config, imagery=imagery, downloader=fake_downloader, now=now, writer=flaky_writer)
        assert [o.success for o in report.outcomes] == [False, True, True]
        assert report.failed[0].reason == "write failed: read-only"


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig(ago="1h")
        assert config.stride_minutes == 10
        assert config.max_concurrency == 8

    def test_concurrency_must_be_positive(self):
        with pytest.raises(ValidationError):
            PipelineConfig(ago="1h", max_concurrency=0)
