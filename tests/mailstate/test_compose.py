"""Unit tests for ComposeSession."""

import itertools

import pytest

from mailstate.compose import SEND_FAILED_MESSAGE, ComposeSession, ComposeStatus
from mailstate.email import Email, Folder
from mailstate.errors import RemoteError, SessionClosedError
from mailstate.fields import ComposeField, ComposeFields
from mailstate.folder_store import SetEmails
from mailstate.prefill import ReplyMode
from tests.fixtures.emails import VIEWER_ADDRESS, create_email


def fixed_ids(*ids):
    """An id factory returning the given ids in order."""
    iterator = iter(ids)
    return lambda: next(iterator)


@pytest.fixture
def session(mail_store, store):
    """A blank session for the viewer."""
    return ComposeSession.blank(
        mail_store, store, VIEWER_ADDRESS, id_factory=fixed_ids("sent000001", "draft00001")
    )


class TestBlankSession:
    """Tests for the blank entry point."""

    def test_initial_state(self, session):
        assert session.status is ComposeStatus.EMPTY
        assert session.fields == ComposeFields()
        assert session.draft_id is None
        assert session.invalid_entries == {
            ComposeField.TO: [],
            ComposeField.CC: [],
            ComposeField.BCC: [],
        }
        assert session.can_submit is True

    def test_cannot_send_without_recipient(self, session):
        """An empty ``to`` is valid but not sendable."""
        assert session.can_send is False

    def test_first_edit_moves_to_editing(self, session):
        session.edit_field(ComposeField.SUBJECT, "Hi")

        assert session.status is ComposeStatus.EDITING
        assert session.fields.subject == "Hi"


class TestEditField:
    """Tests for recipient validation on edit."""

    def test_invalid_to_blocks_submit(self, session):
        session.edit_field(ComposeField.TO, "a@b.com; ; bad-address ; c@d.com")

        assert session.invalid_entries[ComposeField.TO] == ["bad-address"]
        assert session.can_submit is False
        assert session.can_send is False

    def test_accepts_field_name(self, session):
        session.edit_field("cc", "nope")

        assert session.invalid_entries[ComposeField.CC] == ["nope"]

    def test_subject_and_body_do_not_affect_submit(self, session):
        session.edit_field(ComposeField.TO, "a@b.com")
        session.edit_field(ComposeField.SUBJECT, "not an address")
        session.edit_field(ComposeField.BODY, "@@@")

        assert session.can_submit is True
        assert session.can_send is True

    @pytest.mark.parametrize(
        "order",
        list(itertools.permutations([ComposeField.TO, ComposeField.CC, ComposeField.BCC])),
    )
    def test_submit_restored_after_all_fields_fixed(self, session, order):
        """can_submit returns as soon as the last bad field is corrected, in any order."""
        for field in (ComposeField.TO, ComposeField.CC, ComposeField.BCC):
            session.edit_field(field, "broken")
        assert session.can_submit is False

        for index, field in enumerate(order):
            session.edit_field(field, "ok@example.com")
            assert session.can_submit is (index == len(order) - 1)

    def test_unknown_field_rejected(self, session):
        with pytest.raises(ValueError):
            session.edit_field("reply_to", "a@b.com")


class TestSubmitSend:
    """Tests for sending."""

    async def test_send_success(self, session, mail_store, store):
        session.edit_field(ComposeField.TO, " a@b.com ;; c@d.com ")
        session.edit_field(ComposeField.CC, ";")
        session.edit_field(ComposeField.SUBJECT, "Hello")
        session.edit_field(ComposeField.BODY, "Body")

        assert await session.submit_send() is True

        sent = mail_store.send.await_args.args[0]
        assert sent == Email(
            id="sent000001",
            from_address=VIEWER_ADDRESS,
            to="a@b.com; c@d.com",
            cc="",
            bcc="",
            subject="Hello",
            body="Body",
        )
        assert store.folder(Folder.SENT).emails == (sent,)
        assert store.folder(Folder.SENT).total_count == 1
        assert session.status is ComposeStatus.SENT
        assert session.fields == ComposeFields()

    async def test_send_appends_server_copy(self, session, mail_store, store):
        stored = create_email(id="server-1", from_address=VIEWER_ADDRESS, to="a@b.com")
        mail_store.send.side_effect = None
        mail_store.send.return_value = stored
        session.edit_field(ComposeField.TO, "a@b.com")

        await session.submit_send()

        assert store.folder(Folder.SENT).emails == (stored,)

    async def test_send_appends_after_loaded_page(self, session, store):
        existing = create_email(id="old", from_address=VIEWER_ADDRESS)
        store.dispatch(SetEmails(folder=Folder.SENT, emails=[existing], total_count=5))
        session.edit_field(ComposeField.TO, "a@b.com")

        await session.submit_send()

        assert [email.id for email in store.folder(Folder.SENT).emails] == ["old", "sent000001"]
        assert store.folder(Folder.SENT).total_count == 6

    async def test_send_blocked_when_invalid(self, session, mail_store, store):
        session.edit_field(ComposeField.TO, "bad-address")

        assert await session.submit_send() is False

        mail_store.send.assert_not_awaited()
        assert session.status is ComposeStatus.EDITING
        assert store.folder(Folder.SENT).emails == ()

    async def test_send_blocked_without_identity(self, mail_store, store):
        session = ComposeSession.blank(mail_store, store, None)
        session.edit_field(ComposeField.TO, "a@b.com")

        assert session.can_send is False
        assert await session.submit_send() is False
        mail_store.send.assert_not_awaited()

    async def test_send_failure_keeps_fields(self, session, mail_store, store):
        mail_store.send.side_effect = RemoteError("Recipient mailbox is full")
        session.edit_field(ComposeField.TO, "a@b.com")
        session.edit_field(ComposeField.BODY, "Important")

        assert await session.submit_send() is False

        assert session.status is ComposeStatus.EDITING
        assert session.backend_error == "Recipient mailbox is full"
        assert session.fields.to == "a@b.com"
        assert session.fields.body == "Important"
        assert store.folder(Folder.SENT).emails == ()

    async def test_send_failure_default_message(self, session, mail_store):
        mail_store.send.side_effect = RemoteError("")
        session.edit_field(ComposeField.TO, "a@b.com")

        await session.submit_send()

        assert session.backend_error == SEND_FAILED_MESSAGE

    async def test_retry_after_failure(self, mail_store, store):
        session = ComposeSession.blank(
            mail_store, store, VIEWER_ADDRESS, id_factory=fixed_ids("try0000001", "try0000002")
        )
        session.edit_field(ComposeField.TO, "a@b.com")
        mail_store.send.side_effect = [RemoteError("down"), create_email(id="try0000002")]

        assert await session.submit_send() is False
        assert await session.submit_send() is True

        assert session.backend_error is None
        assert session.status is ComposeStatus.SENT

    async def test_send_after_close_raises(self, session):
        session.edit_field(ComposeField.TO, "a@b.com")
        await session.submit_send()

        with pytest.raises(SessionClosedError):
            await session.submit_send()


class TestSubmitDraft:
    """Tests for saving drafts."""

    async def test_new_draft_adopts_generated_id(self, session, mail_store):
        session.edit_field(ComposeField.TO, "half@")
        session.edit_field(ComposeField.SUBJECT, "WIP")

        task = session.submit_draft()

        assert session.status is ComposeStatus.DRAFTED
        assert session.draft_id == "sent000001"
        assert await task is True
        saved = mail_store.save_draft.await_args.args[0]
        assert saved.id == "sent000001"
        assert saved.to == "half@"
        assert saved.from_address == VIEWER_ADDRESS

    async def test_invalid_draft_still_saved(self, session, mail_store):
        session.edit_field(ComposeField.TO, "not-an-address")

        await session.submit_draft()

        mail_store.save_draft.assert_awaited_once()

    async def test_draft_recipients_normalized(self, session, mail_store):
        """Drafts are saved with the same recipient normalization as sends."""
        session.edit_field(ComposeField.TO, " a@b.com; ; c@d.com;")
        session.edit_field(ComposeField.CC, ";;half@ ")

        await session.submit_draft()

        saved = mail_store.save_draft.await_args.args[0]
        assert saved.to == "a@b.com; c@d.com"
        assert saved.cc == "half@"
        assert saved.bcc == ""

    async def test_draft_failure_reported_not_raised(self, mail_store, store):
        notices = []
        session = ComposeSession.blank(mail_store, store, VIEWER_ADDRESS, on_error=notices.append)
        mail_store.save_draft.side_effect = RemoteError("Quota exceeded")

        task = session.submit_draft()

        assert session.status is ComposeStatus.DRAFTED
        assert await task is False
        assert notices == ["Failed to save draft. Quota exceeded"]

    async def test_resumed_draft_round_trip(self, mail_store, store):
        """Saving a resumed draft without edits saves the same email under the same id."""
        original = Email(
            id="draft-7",
            from_address=VIEWER_ADDRESS,
            to="a@b.com; bad",
            cc="c@d.com",
            bcc="",
            subject="Plan",
            body="Step 1",
        )
        store.dispatch(SetEmails(folder=Folder.DRAFTS, emails=[original], total_count=1))

        session = ComposeSession.from_draft(
            mail_store, store, VIEWER_ADDRESS, drafts=store.folder(Folder.DRAFTS), draft_id="draft-7"
        )
        await session.submit_draft()

        mail_store.save_draft.assert_awaited_once_with(original)


class TestDraftResume:
    """Tests for the draft entry point."""

    def test_fields_copied_from_draft(self, mail_store, store):
        draft = create_email(id="d1", to="a@b.com; oops", subject="Draft", body="Text")
        store.dispatch(SetEmails(folder=Folder.DRAFTS, emails=[draft], total_count=1))

        session = ComposeSession.from_draft(
            mail_store, store, VIEWER_ADDRESS, drafts=store.folder(Folder.DRAFTS), draft_id="d1"
        )

        assert session.draft_id == "d1"
        assert session.status is ComposeStatus.EDITING
        assert session.fields.to == "a@b.com; oops"
        assert session.fields.subject == "Draft"
        assert session.invalid_entries[ComposeField.TO] == ["oops"]
        assert session.can_submit is False

    def test_missing_draft_opens_blank(self, mail_store, store):
        session = ComposeSession.from_draft(
            mail_store, store, VIEWER_ADDRESS, drafts=store.folder(Folder.DRAFTS), draft_id="gone"
        )

        assert session.draft_id is None
        assert session.fields == ComposeFields()
        assert session.status is ComposeStatus.EMPTY

    async def test_sending_resumed_draft_uses_new_id(self, mail_store, store):
        draft = create_email(id="d1", to="a@b.com")
        store.dispatch(SetEmails(folder=Folder.DRAFTS, emails=[draft], total_count=1))
        session = ComposeSession.from_draft(
            mail_store,
            store,
            VIEWER_ADDRESS,
            drafts=store.folder(Folder.DRAFTS),
            draft_id="d1",
            id_factory=fixed_ids("fresh00001"),
        )

        await session.submit_send()

        assert mail_store.send.await_args.args[0].id == "fresh00001"


class TestReplySession:
    """Tests for the reply entry point."""

    def test_prefilled_from_source(self, mail_store, store):
        source = create_email(from_address="alice@example.com", subject="Plans")

        session = ComposeSession.from_reply(
            mail_store, store, VIEWER_ADDRESS, source=source, mode=ReplyMode.REPLY
        )

        assert session.fields.to == "alice@example.com"
        assert session.fields.subject == "Re: Plans"
        assert session.draft_id is None
        assert session.status is ComposeStatus.EDITING
        assert session.can_send is True

    def test_edited_prefill_revalidated(self, mail_store, store):
        session = ComposeSession.from_reply(
            mail_store, store, VIEWER_ADDRESS, source=create_email(), mode=ReplyMode.REPLY
        )

        session.edit_field(ComposeField.TO, session.fields.to + "; typo@")

        assert session.invalid_entries[ComposeField.TO] == ["typo@"]
        assert session.can_send is False


class TestCancel:
    """Tests for cancelling."""

    def test_cancel_has_no_side_effects(self, session, mail_store, store):
        session.edit_field(ComposeField.TO, "a@b.com")
        before = store.state

        session.cancel()

        assert session.status is ComposeStatus.CANCELLED
        assert store.state is before
        mail_store.send.assert_not_called()
        mail_store.save_draft.assert_not_called()

    def test_edit_after_cancel_raises(self, session):
        session.cancel()

        with pytest.raises(SessionClosedError):
            session.edit_field(ComposeField.TO, "a@b.com")
