"""Tests for the application wiring and the command line entry point."""
from datetime import datetime

import pytest

from kassenblick.core.app import KassenBlickApp
from kassenblick.core.colors import COLOR
from kassenblick.main import main
from kassenblick.plugins.bills.maintenance import BillsMaintenanceTask

CONFIG_TEMPLATE = """\
update_interval: 1000
components:
  Bills:
    enable: true
    path: Bills.csv
  Buckets:
    enable: {buckets_enabled}
    path: Buckets.csv
maintenance:
  enable: {maintenance_enabled}
logging:
  level: DEBUG
  file: ""
"""


def write_config(path, buckets_enabled=True, maintenance_enabled=False):
    path.write_text(
        CONFIG_TEMPLATE.format(
            buckets_enabled=str(buckets_enabled).lower(),
            maintenance_enabled=str(maintenance_enabled).lower(),
        )
    )
    return path


@pytest.fixture
def config_file(tmp_path, bills_csv_file, buckets_csv_file):
    return write_config(tmp_path / "config.yaml")


@pytest.fixture
def app(config_file, presenter, clock):
    app = KassenBlickApp(
        config_path=str(config_file), watch_config=False, presenter=presenter, clock=clock, setup_logging=False
    )
    yield app
    app.stop()


class TestKassenBlickApp:
    """Test cases for KassenBlickApp."""

    def test_components_from_config(self, app, bills_csv_file):
        names = [component.name for component in app.orchestrator.components]
        assert sorted(names) == ["Bills", "Buckets"]
        bills = next(c for c in app.orchestrator.components if c.name == "Bills")
        assert bills.source_path == bills_csv_file.resolve()
        assert app.maintenance is None

    def test_tick_applies_then_idles(self, app, presenter):
        assert sorted(app.tick()) == ["Bills", "Buckets"]
        assert presenter.redraws == 1
        assert app.tick() == []
        assert presenter.redraws == 1

    def test_run_once(self, app, presenter):
        app.run(once=True)
        assert len(presenter.bill_batches) == 1
        assert len(presenter.bucket_batches) == 1
        assert presenter.redraws == 1

    def test_config_change_applied_on_next_tick(self, app, config_file, presenter):
        app.tick()
        write_config(config_file, buckets_enabled=False)
        app.config.reload()

        # Queued only; the running orchestrator is untouched until the next tick
        assert len(app.orchestrator.components) == 2
        assert app.tick() == ["Bills"]
        assert [c.name for c in app.orchestrator.components] == ["Bills"]
        assert app.presenter is presenter

    def test_maintenance_runs_inside_tick(self, tmp_path, bills_csv_file, buckets_csv_file, presenter, clock):
        config_file = write_config(tmp_path / "config.yaml", maintenance_enabled=True)
        app = KassenBlickApp(
            config_path=str(config_file), watch_config=False, presenter=presenter, clock=clock, setup_logging=False
        )
        try:
            assert isinstance(app.maintenance, BillsMaintenanceTask)
            assert app.maintenance.next_run_at is not None

            app.tick()
            app.maintenance.next_run_at = datetime(2000, 1, 1)
            app.tick()
            assert "1,Rent,RNT,Unpaid" in bills_csv_file.read_text()

            # The rewrite is picked up as an ordinary change
            assert app.tick() == ["Bills"]
            rent = presenter.bill_batches[-1][1]
            assert (rent.label, rent.fill) == ("RNT", COLOR.RED)
        finally:
            app.stop()

    def test_stop_is_idempotent(self, app):
        app.stop()
        app.stop()
        assert app._stop_event.is_set()


class TestMain:
    """Test cases for the command line entry point."""

    def test_validate_ok(self, config_file, bills_csv_file, bills_csv_content):
        assert main(["--config", str(config_file), "--validate"]) == 0
        assert bills_csv_file.read_text() == bills_csv_content

    def test_validate_missing_columns(self, config_file, bills_csv_file):
        bills_csv_file.write_text("StatusID,Name\n0,Rent\n")
        assert main(["--config", str(config_file), "--validate"]) == 1

    def test_validate_missing_file(self, config_file, bills_csv_file):
        bills_csv_file.unlink()
        assert main(["--config", str(config_file), "--validate"]) == 2

    def test_reset(self, config_file, bills_csv_file):
        assert main(["--config", str(config_file), "--reset"]) == 0
        content = bills_csv_file.read_text()
        assert "0,Rent" not in content
        assert "1,Rent,RNT,Unpaid" in content

    def test_once(self, config_file, monkeypatch):
        ran = []
        monkeypatch.setattr(KassenBlickApp, "run", lambda self, once=False: ran.append(once))
        assert main(["--config", str(config_file), "--once"]) == 0
        assert ran == [True]
