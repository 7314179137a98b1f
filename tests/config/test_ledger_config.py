"""
Tests for ledger configuration: schema validation, YAML loading, the
get_active_config() entrypoint and the config-to-kernel bridges.
"""

from uuid import uuid4

import pytest
import yaml

from ledger_config import CONFIG_PATH_ENV_VAR, LedgerConfig, get_active_config
from ledger_config.bridges import build_ledger_service, init_database, run_ledger_operation
from ledger_config.loader import compute_checksum, load_config
from ledger_kernel.domain.commands import AllocateFifoCommand
from ledger_kernel.exceptions import ConcurrencyConflictError


class TestLedgerConfigSchema:
    """Defaults and validation in __post_init__."""

    def test_defaults(self):
        config = LedgerConfig.with_defaults()

        assert config.default_currency == "INR"
        assert config.database_url is None
        assert config.isolation_level == "REPEATABLE READ"
        assert config.max_conflict_retries == 3
        assert config.lock_invoice_rows is True
        assert config.log_level == "INFO"

    def test_normalizes_case(self):
        config = LedgerConfig(
            default_currency=" usd ", isolation_level="serializable", log_level="debug"
        )

        assert config.default_currency == "USD"
        assert config.isolation_level == "SERIALIZABLE"
        assert config.log_level == "DEBUG"

    def test_unknown_currency(self):
        with pytest.raises(ValueError, match="default_currency"):
            LedgerConfig(default_currency="RUPEE")

    def test_unknown_isolation_level(self):
        with pytest.raises(ValueError, match="isolation_level"):
            LedgerConfig(isolation_level="READ UNCOMMITTED")

    @pytest.mark.parametrize("retries", [0, -1, True, "3", 2.5])
    def test_bad_retry_budget(self, retries):
        with pytest.raises(ValueError, match="max_conflict_retries"):
            LedgerConfig(max_conflict_retries=retries)

    def test_bad_log_level(self):
        with pytest.raises(ValueError, match="log_level"):
            LedgerConfig(log_level="VERBOSE")

    def test_blank_database_url(self):
        with pytest.raises(ValueError, match="database_url"):
            LedgerConfig(database_url="  ")

    def test_from_dict(self):
        config = LedgerConfig.from_dict({"default_currency": "AED", "max_conflict_retries": 5})

        assert config.default_currency == "AED"
        assert config.max_conflict_retries == 5

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown"):
            LedgerConfig.from_dict({"default_curency": "INR"})


class TestLoader:
    """YAML files."""

    def test_nested_section(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "ledger": {
                        "default_currency": "INR",
                        "database_url": "sqlite:///ledger.db",
                        "lock_invoice_rows": False,
                    }
                }
            )
        )

        config = load_config(path)

        assert config.database_url == "sqlite:///ledger.db"
        assert config.lock_invoice_rows is False

    def test_top_level_settings(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text("max_conflict_retries: 7\n")

        assert load_config(path).max_conflict_retries == 7

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text("")

        assert load_config(path) == LedgerConfig()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text("- INR\n- USD\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_checksum_tracks_content(self):
        assert compute_checksum(LedgerConfig()) == compute_checksum(LedgerConfig())
        assert compute_checksum(LedgerConfig()) != compute_checksum(
            LedgerConfig(max_conflict_retries=4)
        )


class TestGetActiveConfig:
    """The single configuration entrypoint."""

    def test_defaults_without_path(self, monkeypatch):
        monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)

        assert get_active_config() == LedgerConfig()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "ledger.yaml"
        path.write_text("ledger:\n  default_currency: SGD\n")

        assert get_active_config(path).default_currency == "SGD"

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "ledger.yaml"
        path.write_text("ledger:\n  max_conflict_retries: 9\n")
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(path))

        assert get_active_config().max_conflict_retries == 9

    def test_explicit_path_wins_over_environment(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.yaml"
        env_path.write_text("default_currency: USD\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("default_currency: EUR\n")
        monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(env_path))

        assert get_active_config(explicit).default_currency == "EUR"

    def test_emits_trace(self, monkeypatch, captured_logs):
        monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)

        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["source"] == "defaults"
        assert traces[0]["checksum"] == compute_checksum(config)


class TestBridges:
    """Config applied to kernel objects."""

    def test_init_database_requires_url(self):
        with pytest.raises(ValueError, match="database_url"):
            init_database(LedgerConfig())

    def test_service_uses_configured_currency(
        self, session, create_invoice, party_id, test_actor_id
    ):
        dollar = create_invoice(10000, currency="USD")
        service = build_ledger_service(session, LedgerConfig(default_currency="USD"))

        result = service.allocate_fifo(
            AllocateFifoCommand(
                party_id=party_id,
                amount=2500,
                payment_date=dollar.invoice_date,
                payment_method="wire",
            ),
            test_actor_id,
        )

        assert result.lines[0].invoice_id == dollar.id
        assert result.total_amount.currency.code == "USD"

    def test_run_ledger_operation_uses_retry_budget(self, committing_session_factory):
        attempts = []

        def always_conflicts(session):
            attempts.append(session)
            raise ConcurrencyConflictError(uuid4(), 0)

        with pytest.raises(ConcurrencyConflictError):
            run_ledger_operation(
                LedgerConfig(max_conflict_retries=4),
                always_conflicts,
                session_factory=committing_session_factory,
            )

        assert len(attempts) == 4
