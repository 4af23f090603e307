"""Tests for mailroom.email."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from mailroom.address import EmailAddress
from mailroom.attachment import Attachment
from mailroom.email import Email, get_address
from mailroom.errors import ConstructionError, NotNormalizedError
from mailroom.normalizer import normalize_addresses


class TestNewEmail:
    def test_defaults(self):
        email = Email.new()
        assert email.from_ is None
        assert email.to is None
        assert email.cc is None
        assert email.bcc is None
        assert email.subject is None
        assert email.html_body is None
        assert email.text_body is None
        assert email.headers == {}
        assert email.attachments == []
        assert email.private == {}
        assert email.assigns == {}

    def test_from_alias(self):
        email = Email.new(**{"from": "me@foo.com", "to": "you@foo.com"})
        assert email.from_ == "me@foo.com"

    def test_attachments_are_checked(self):
        with pytest.raises(ConstructionError):
            Email.new(attachments=[Attachment(data=b"no filename")])

    def test_is_immutable(self):
        email = Email.new(subject="a")
        with pytest.raises(ValidationError):
            email.subject = "b"


class TestBuilders:
    def test_chained_builders(self):
        email = (
            Email.new()
            .put_from("me@foo.com")
            .put_to("to@example.com")
            .put_cc("cc@example.com")
            .put_bcc("bcc@foo.com")
            .put_subject("Flexible Emails")
            .put_html_body("<p>hi</p>")
            .put_text_body("hi")
            .put_header("Reply-To", "reply@foo.com")
        )
        assert email.from_ == "me@foo.com"
        assert email.to == "to@example.com"
        assert email.cc == "cc@example.com"
        assert email.bcc == "bcc@foo.com"
        assert email.subject == "Flexible Emails"
        assert email.html_body == "<p>hi</p>"
        assert email.text_body == "hi"
        assert email.headers["Reply-To"] == "reply@foo.com"

    def test_builders_do_not_modify_original(self):
        original = Email.new(subject="original")
        changed = original.put_subject("changed").put_header("X-A", "1")
        assert original.subject == "original"
        assert original.headers == {}
        assert changed.subject == "changed"

    def test_put_private(self):
        email = Email.new().put_private("tags", ["welcome"])
        assert email.private["tags"] == ["welcome"]

    def test_assign(self):
        email = Email.new().assign("user", "alice")
        assert email.assigns == {"user": "alice"}


class TestPutHeader:
    def test_adds_new_header(self):
        assert Email.new().put_header("x-hero", "mario").headers == {"x-hero": "mario"}

    def test_replaces_existing_header(self):
        email = Email.new(headers={"x-hero": "mario"}).put_header("x-hero", "luigi")
        assert email.headers == {"x-hero": "luigi"}

    def test_accepts_list(self):
        email = Email.new().put_header("x-hero", ["mario", "luigi"])
        assert email.headers == {"x-hero": ["mario", "luigi"]}

    @pytest.mark.parametrize("value", [None, {"name": "mario"}, 42, ["mario", 1]])
    def test_ignores_invalid_values(self, value):
        assert Email.new().put_header("x-hero", value).headers == {}

    def test_combine_new_header(self):
        email = Email.new().put_header("x-hero", "mario", combine=True)
        assert email.headers == {"x-hero": "mario"}

    def test_combine_with_string(self):
        email = Email.new(headers={"x-hero": "mario"}).put_header("x-hero", "luigi", combine=True)
        assert email.headers == {"x-hero": ["luigi", "mario"]}

    def test_combine_with_list(self):
        email = Email.new(headers={"x-hero": ["mario", "luigi"]}).put_header(
            "x-hero", ["dk", "yoshi"], combine=True
        )
        assert email.headers == {"x-hero": ["dk", "yoshi", "mario", "luigi"]}


class TestPutAttachment:
    def test_adds_attachment(self):
        attachment = Attachment(filename="attachment.docx", data=b"content")
        email = Email.new().put_attachment(attachment)
        assert email.attachments == [attachment]

    def test_from_path(self, tmp_path: Path):
        path = tmp_path / "report.txt"
        path.write_text("numbers")
        email = Email.new().put_attachment(path, content_id="report-1")
        [attachment] = email.attachments
        assert attachment.filename == "report.txt"
        assert attachment.content_type == "text/plain"
        assert attachment.content_id == "report-1"
        assert attachment.data == b"numbers"

    def test_preserves_order(self):
        first = Attachment(filename="1.txt", data=b"1")
        second = Attachment(filename="2.txt", data=b"2")
        email = Email.new().put_attachment(first).put_attachment(second)
        assert [a.filename for a in email.attachments] == ["1.txt", "2.txt"]

    def test_without_filename_raises(self):
        with pytest.raises(ConstructionError, match="filename"):
            Email.new().put_attachment(Attachment(filename=None, data=b"content"))

    def test_empty_filename_raises(self):
        with pytest.raises(ConstructionError, match="filename"):
            Email.new().put_attachment(Attachment(filename="", data=b"content"))

    def test_without_data_raises(self):
        with pytest.raises(ConstructionError, match="data"):
            Email.new().put_attachment(Attachment(filename="attachment.docx"))

    def test_empty_bytes_are_valid_data(self):
        email = Email.new().put_attachment(Attachment(filename="empty.txt", data=b""))
        assert len(email.attachments) == 1


class TestRecipients:
    def test_all_recipients(self):
        email = normalize_addresses(
            Email.new(from_="foo", to="to@foo.com", cc="cc@foo.com", bcc="bcc@foo.com")
        )
        assert email.is_normalized
        assert email.all_recipients() == [
            (None, "to@foo.com"),
            (None, "cc@foo.com"),
            (None, "bcc@foo.com"),
        ]

    def test_all_recipients_requires_normalized_email(self):
        with pytest.raises(NotNormalizedError, match="normalized"):
            Email.new(to=["to@foo.com"]).all_recipients()

    def test_raw_tuples_are_not_normalized(self):
        email = Email.new(from_=("A", "a@foo.com"), to=[("B", "b@foo.com")], cc=[], bcc=[])
        assert not email.is_normalized


class TestGetAddress:
    def test_normalized_address(self):
        assert get_address(EmailAddress("Paul", "paul@gmail.com")) == "paul@gmail.com"
        assert get_address(("Paul", "paul@gmail.com")) == "paul@gmail.com"

    def test_non_normalized_address_raises(self):
        with pytest.raises(NotNormalizedError, match="expected an address"):
            get_address(())
