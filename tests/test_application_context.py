"""Startup checks for the application context under the "test" profile."""

from pathlib import Path

import pytest

from conftest import write_profile
from pickleball_club.bootstrap import (
    TEST_PROFILE,
    build_context,
    check_startup,
    run_startup_check,
)
from pickleball_club.config import PROFILE_DIR
from pickleball_club.database import Datasource
from pickleball_club.exceptions import (
    CircularDependencyError,
    ComponentConstructionError,
    InitializationFault,
    InvalidConfigurationError,
    MissingConfigurationError,
)
from pickleball_club.services import ClubSettingsService


def test_context_loads(profile_dir: Path) -> None:
    # Passes if the application context builds under the test profile
    run_startup_check(TEST_PROFILE, env_dir=profile_dir)


def test_context_loads_with_shipped_test_profile() -> None:
    assert (PROFILE_DIR / "test.env").is_file()
    run_startup_check(TEST_PROFILE)


class TestStartupCheck:
    """Test suite for the composition-root startup check."""

    def test_repeated_checks_give_same_result(self, profile_dir: Path):
        """Test that identical configuration passes every time."""
        reports = [check_startup(TEST_PROFILE, env_dir=profile_dir) for _ in range(3)]
        assert all(report.ok for report in reports)
        assert {report.profile for report in reports} == {TEST_PROFILE}

    def test_missing_datasource_url_fails(self, tmp_path: Path):
        """Test that removing the datasource URL fails with a fault naming it."""
        write_profile(tmp_path, TEST_PROFILE, club_timezone="UTC")

        with pytest.raises(InitializationFault) as excinfo:
            run_startup_check(TEST_PROFILE, env_dir=tmp_path)

        fault = excinfo.value
        assert isinstance(fault, MissingConfigurationError)
        assert fault.component == "settings"
        assert fault.fields == ["datasource_url"]
        assert "datasource_url" in str(fault)
        assert "PICKLEBALL_DATASOURCE_URL" in str(fault)

    def test_missing_datasource_url_fails_every_time(self, tmp_path: Path):
        """Test that a failing configuration fails deterministically."""
        write_profile(tmp_path, TEST_PROFILE, club_timezone="UTC")

        reports = [check_startup(TEST_PROFILE, env_dir=tmp_path) for _ in range(2)]

        assert not any(report.ok for report in reports)
        assert all(isinstance(report.fault, MissingConfigurationError) for report in reports)

    def test_environment_supplies_missing_value(self, tmp_path: Path, monkeypatch, database_url: str):
        """Test that an environment variable completes a profile lacking the datasource URL."""
        write_profile(tmp_path, TEST_PROFILE, club_timezone="UTC")
        monkeypatch.setenv("PICKLEBALL_DATASOURCE_URL", database_url)

        assert check_startup(TEST_PROFILE, env_dir=tmp_path).ok

    def test_unreachable_database_fails(self, tmp_path: Path):
        """Test that a datasource that cannot be opened fails the check."""
        missing_dir = tmp_path / "does-not-exist"
        write_profile(tmp_path, TEST_PROFILE, datasource_url=f"sqlite:///{missing_dir / 'club.db'}")

        with pytest.raises(ComponentConstructionError) as excinfo:
            run_startup_check(TEST_PROFILE, env_dir=tmp_path)

        assert excinfo.value.component == "datasource"
        assert excinfo.value.__cause__ is not None

    def test_unreachable_database_passes_without_verification(self, tmp_path: Path):
        """Test that skipping the connection probe only builds the engine."""
        missing_dir = tmp_path / "does-not-exist"
        write_profile(
            tmp_path,
            TEST_PROFILE,
            datasource_url=f"sqlite:///{missing_dir / 'club.db'}",
            datasource_verify_connection="false",
        )

        assert check_startup(TEST_PROFILE, env_dir=tmp_path).ok

    def test_invalid_datasource_url_fails(self, tmp_path: Path):
        """Test that a malformed datasource URL is reported by the datasource component."""
        write_profile(tmp_path, TEST_PROFILE, datasource_url="not a database url")

        report = check_startup(TEST_PROFILE, env_dir=tmp_path)

        assert not report.ok
        assert report.fault.component == "datasource"

    def test_circular_dependency_fails(self, profile_dir: Path):
        """Test that a cycle in the graph is reported instead of hanging."""

        def add_cycle(container):
            container.register("booking_service", lambda court_service: object(), depends_on=("court_service",))
            container.register("court_service", lambda booking_service: object(), depends_on=("booking_service",))

        with pytest.raises(CircularDependencyError) as excinfo:
            run_startup_check(TEST_PROFILE, env_dir=profile_dir, configure=add_cycle)

        assert excinfo.value.cycle == ["booking_service", "court_service", "booking_service"]

    def test_profile_in_overrides_reported(self, profile_dir: Path):
        """Test that a profile override surfaces as a settings fault."""
        report = check_startup(TEST_PROFILE, env_dir=profile_dir, overrides={"profile": "production"})

        assert isinstance(report.fault, InvalidConfigurationError)
        assert report.fault.component == "settings"

    def test_failing_configure_hook_reported(self, profile_dir: Path):
        """Test that an error raised while configuring the container is a fault."""

        def register_twice(container):
            container.register("settings", dict)

        report = check_startup(TEST_PROFILE, env_dir=profile_dir, configure=register_twice)

        assert not report.ok
        assert type(report.fault) is InitializationFault
        assert isinstance(report.fault.__cause__, ValueError)
        assert "already registered" in str(report.fault)

    def test_substituted_component_is_injected(self, profile_dir: Path):
        """Test that a substituted component is used by its dependants."""

        class FakeDatasource:
            closed = False

            def close(self):
                self.closed = True

        fake = FakeDatasource()

        def substitute(container):
            container.override("datasource", lambda settings: fake)
            container.register("reporter", lambda datasource: datasource, depends_on=("datasource",))

        context = build_context(TEST_PROFILE, env_dir=profile_dir, configure=substitute)
        with context:
            assert context.get("reporter") is fake
        assert fake.closed


class TestApplicationGraph:
    """Test suite for the components the composition root wires."""

    def test_components_in_dependency_order(self, profile_dir: Path):
        """Test that settings are built before the components needing them."""
        with build_context(TEST_PROFILE, env_dir=profile_dir) as context:
            assert context.names == ["settings", "datasource", "club_settings_service"]
            assert context.profile == TEST_PROFILE

    def test_components_receive_settings(self, profile_dir: Path, database_url: str):
        """Test that the datasource and club settings share the loaded settings."""
        with build_context(TEST_PROFILE, env_dir=profile_dir) as context:
            settings = context.get("settings")
            datasource = context.get("datasource")
            club_settings = context.get("club_settings_service")

            assert settings.profile == TEST_PROFILE
            assert isinstance(datasource, Datasource)
            assert datasource.url == database_url
            assert isinstance(club_settings, ClubSettingsService)
            assert club_settings.club_name == "Test Pickleball Club"

    def test_overrides_take_precedence(self, profile_dir: Path):
        """Test that explicit overrides beat the profile files."""
        with build_context(TEST_PROFILE, env_dir=profile_dir, overrides={"club_name": "Override Club"}) as context:
            assert context.get("club_settings_service").club_name == "Override Club"
