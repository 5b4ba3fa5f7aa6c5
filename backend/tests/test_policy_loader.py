"""Tests for the rent policy loader."""
from app.utils.policy_loader import DEFAULT_POLICY, clear_policy_cache, load_rent_policy


class TestLoadRentPolicy:
    def test_repository_policy(self):
        policy = load_rent_policy(2025)
        assert policy.grace_end_day == 5
        assert policy.late_end_day == 9
        assert policy.penalty == 200
        assert policy.reminder_days == (1, 5)
        assert policy.currency == "KSh"

    def test_falls_back_to_latest_earlier_year(self, tmp_path, monkeypatch):
        (tmp_path / "2023.yaml").write_text("rent:\n  penalty: 150\n")
        (tmp_path / "2025.yaml").write_text("rent:\n  penalty: 300\n")
        monkeypatch.setenv("RENT_POLICY_PATH", str(tmp_path))
        clear_policy_cache()
        assert load_rent_policy(2024).penalty == 150
        assert load_rent_policy(2026).penalty == 300

    def test_partial_file_keeps_defaults(self, tmp_path, monkeypatch):
        (tmp_path / "2025.yaml").write_text("rent:\n  grace_end_day: 7\n")
        monkeypatch.setenv("RENT_POLICY_PATH", str(tmp_path))
        clear_policy_cache()
        policy = load_rent_policy(2025)
        assert policy.grace_end_day == 7
        assert policy.late_end_day == DEFAULT_POLICY.late_end_day
        assert policy.penalty == DEFAULT_POLICY.penalty

    def test_defaults_when_nothing_applies(self, tmp_path, monkeypatch):
        (tmp_path / "2030.yaml").write_text("rent:\n  penalty: 999\n")
        monkeypatch.setenv("RENT_POLICY_PATH", str(tmp_path))
        clear_policy_cache()
        assert load_rent_policy(2025) == DEFAULT_POLICY
