from pathlib import Path

from inkwell.settings import Settings, choose_env_file


def test_site_config_uses_environment():
    s = Settings(_env_file=None, SITE_URL="https://example.com/", SITE_AUTHOR="ada")
    site = s.site
    assert site.url == "https://example.com"
    assert site.author == "ada"
    assert site.default_image == "https://example.com/og-default.png"


def test_content_defaults():
    s = Settings(_env_file=None)
    assert s.WORDS_PER_MINUTE == 200
    assert s.SUMMARY_LENGTH == 160


def test_choose_env_file_prefers_env_local(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: str(self) == ".env.local")
    assert choose_env_file() == ".env.local"


def test_choose_env_file_falls_back(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: False)
    assert choose_env_file() == ".env"
