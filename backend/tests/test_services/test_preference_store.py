"""
Tests for best-effort preference storage.
"""
from concurrent.futures import ThreadPoolExecutor

from app.models.user import UserPreferences
from app.services.preference_store import PreferenceStore


class TestPreferenceStore:
    """Tests for the JSON file preference store."""

    def test_save_and_get(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "prefs.json"))
        preferences = UserPreferences(username="learner", theme="dark", show_english=False)

        assert store.save(preferences) is True

        loaded = store.get("learner")
        assert loaded.theme == "dark"
        assert loaded.show_english is False
        assert loaded.show_jyutping is True

    def test_missing_user(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "prefs.json"))
        assert store.get("nobody") is None

    def test_users_are_independent(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "prefs.json"))
        store.save(UserPreferences(username="a", language="zh"))
        store.save(UserPreferences(username="b", language="en"))

        assert store.get("a").language == "zh"
        assert store.get("b").language == "en"

    def test_clear(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "prefs.json"))
        store.save(UserPreferences(username="learner"))

        assert store.clear("learner") is True
        assert store.get("learner") is None
        assert store.clear("learner") is False

    def test_unavailable_storage(self):
        store = PreferenceStore("")

        assert store.available is False
        assert store.save(UserPreferences(username="learner")) is False
        assert store.get("learner") is None

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")
        store = PreferenceStore(str(path))

        assert store.get("learner") is None
        # A save replaces the unreadable file
        assert store.save(UserPreferences(username="learner")) is True
        assert store.get("learner") is not None

    def test_unwritable_location(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "missing_dir" / "prefs.json"))
        assert store.save(UserPreferences(username="learner")) is False

    def test_concurrent_saves_keep_every_user(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "prefs.json"))
        usernames = [f"user_{index}" for index in range(20)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda name: store.save(UserPreferences(username=name)), usernames))

        assert all(results)
        assert all(store.get(name) is not None for name in usernames)

    def test_save_leaves_no_temporary_file(self, tmp_path):
        store = PreferenceStore(str(tmp_path / "prefs.json"))
        store.save(UserPreferences(username="learner"))

        assert [path.name for path in tmp_path.iterdir()] == ["prefs.json"]
