from inventory_settings import get_settings


class TestSettings:
    """Configuration comes from defaults, the environment and .env files."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = get_settings()
        assert settings.data_file == "inventory.csv"
        assert settings.low_stock_threshold == 10
        assert settings.log_level == "WARNING"

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("INVENTORY_DATA_FILE", "/data/stock.csv")
        monkeypatch.setenv("INVENTORY_LOW_STOCK_THRESHOLD", "25")
        settings = get_settings()
        assert settings.data_file == "/data/stock.csv"
        assert settings.low_stock_threshold == 25

    def test_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("INVENTORY_LOG_LEVEL=DEBUG\nUNRELATED=1\n")
        assert get_settings().log_level == "DEBUG"
