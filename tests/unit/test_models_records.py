"""
Domain record model validation and serialization.
"""

import uuid
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from core.models import ResourceItem, ResourceHyperlink, ImportDocument, ResourceSensitivity
from core.models.records import TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH


class TestResourceHyperlink:
    def test_valid(self, hyperlink_data):
        link = ResourceHyperlink(**hyperlink_data)
        assert str(link.url).startswith("https://")

    def test_defaults(self):
        link = ResourceHyperlink(url="https://example.org/", title="Example")
        assert link.description == ""
        assert link.is_external is True
        assert link.is_trusted is False

    @pytest.mark.parametrize("url", ["not a url", "/relative/path", "ftp//missing-colon"])
    def test_rejects_non_absolute_url(self, url):
        with pytest.raises(ValidationError):
            ResourceHyperlink(url=url, title="x")

    def test_requires_title(self):
        with pytest.raises(ValidationError):
            ResourceHyperlink(url="https://example.org/", title="")

    def test_accepts_camel_case_input(self):
        link = ResourceHyperlink(url="https://example.org/", title="t", isExternal=False, isTrusted=True)
        assert link.is_external is False
        assert link.is_trusted is True


class TestResourceItem:
    def test_valid(self, resource_item_data):
        item = ResourceItem(**resource_item_data)
        assert item.imported_by is None
        assert item.imported_on is None

    def test_title_at_limit(self, resource_item_data):
        resource_item_data["title"] = "t" * TITLE_MAX_LENGTH
        assert len(ResourceItem(**resource_item_data).title) == TITLE_MAX_LENGTH

    def test_title_over_limit(self, resource_item_data):
        resource_item_data["title"] = "t" * (TITLE_MAX_LENGTH + 1)
        with pytest.raises(ValidationError):
            ResourceItem(**resource_item_data)

    @pytest.mark.parametrize("title", ["", "   "])
    def test_title_blank(self, resource_item_data, title):
        resource_item_data["title"] = title
        with pytest.raises(ValidationError):
            ResourceItem(**resource_item_data)

    def test_description_over_limit(self, resource_item_data):
        resource_item_data["description"] = "d" * (DESCRIPTION_MAX_LENGTH + 1)
        with pytest.raises(ValidationError):
            ResourceItem(**resource_item_data)

    def test_description_optional(self, resource_item_data):
        resource_item_data.pop("description")
        assert ResourceItem(**resource_item_data).description is None

    def test_defaults(self):
        item = ResourceItem(title="Only a title")
        assert item.tags == []
        assert item.references == []
        assert item.sensitivity == ResourceSensitivity.PUBLIC


class TestImportDocument:
    def _stamp(self, record, partition_key="/content/dev/import"):
        return ImportDocument.from_record(
            record,
            item_id=str(uuid.uuid4()),
            partition_key=partition_key,
            imported_by="seed-host",
            imported_on=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

    def test_from_record_keeps_domain_fields(self, resource_item_data):
        record = ResourceItem(**resource_item_data)
        document = self._stamp(record)
        assert document.title == record.title
        assert document.tags == record.tags
        assert document.references == record.references
        assert document.published_on == record.published_on

    def test_from_record_does_not_mutate_record(self, resource_item_data):
        record = ResourceItem(**resource_item_data)
        self._stamp(record)
        assert record.imported_by is None
        assert record.imported_on is None

    def test_to_item_uses_camel_case_and_partition_field(self, resource_item_data):
        document = self._stamp(ResourceItem(**resource_item_data), partition_key="/x/test/import")
        body = document.to_item()
        assert body["filePath"] == "/x/test/import"
        assert body["importedBy"] == "seed-host"
        assert body["importedOn"].startswith("2026-01-02T03:04:05")
        assert "id" in body
        assert "file_path" not in body

    def test_to_item_is_json_safe(self, resource_item_data):
        import json
        body = self._stamp(ResourceItem(**resource_item_data)).to_item()
        json.dumps(body)
        assert body["sensitivity"] in {s.value for s in ResourceSensitivity}

    def test_requires_provenance(self, resource_item_data):
        with pytest.raises(ValidationError):
            ImportDocument(**resource_item_data, id="x", file_path="/p")
