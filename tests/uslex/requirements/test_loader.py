import json
import logging

from uslex.core.store import ProvisionStore
from uslex.requirements.loader import load_classifications


class TestLoadClassifications:
    def test_invalid_entries_skipped(self, store_path, classifications_file, caplog):
        with ProvisionStore(store_path) as store:
            with caplog.at_level(logging.WARNING, logger="uslex.requirements.loader"):
                written = load_classifications(store, classifications_file)

            assert written == 6
            assert store.counts()["state_requirements"] == 6
        assert "US-XX" in caplog.text
        assert "carrier_pigeons" in caplog.text
        assert "No document for US-FL FIPA" in caplog.text

    def test_reload_replaces_jurisdiction_rows(self, store_path, tmp_path):
        path = tmp_path / "update.json"
        path.write_text(
            json.dumps(
                {
                    "requirements": [
                        {
                            "jurisdiction": "US-NY",
                            "category": "breach_notification",
                            "subcategory": "penalties",
                            "law_short_name": "NY Breach",
                            "summary_text": "Civil penalty up to $250,000.",
                            "penalty_max": "$250,000",
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )

        with ProvisionStore(store_path) as store:
            assert load_classifications(store, str(path)) == 1
            rows = store.state_requirements("US-NY", None, 10)
            assert [row["subcategory"] for row in rows] == ["penalties"]
            assert store.counts()["state_requirements"] == 6
            assert rows[0]["law_short_name"] == "NY Breach"
            assert rows[0]["section_number"] is None

    def test_missing_file(self, store_path, tmp_path):
        with ProvisionStore(store_path) as store:
            assert load_classifications(store, str(tmp_path / "absent.json")) == 0
            assert store.counts()["state_requirements"] == 6
