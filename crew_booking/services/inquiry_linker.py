"""Inquiry linker — fills an event draft's customer fields from a selected inquiry.

The link is one-directional: nothing is ever written back to the inquiry.
"""
import logging

from crew_booking.schemas.event import EventDraft
from crew_booking.services.exceptions import NotFoundError
from crew_booking.services.stores import InquiryProvider

logger = logging.getLogger(__name__)


class InquiryLinker:
    def __init__(self, inquiries: InquiryProvider):
        self.inquiries = inquiries

    async def select_inquiry(self, draft: EventDraft, inquiry_id: str) -> EventDraft:
        """Link the inquiry and overwrite customer name/email. Other fields are left alone."""
        inquiry = next(
            (i for i in await self.inquiries.list_inquiries() if i.inquiry_id == inquiry_id),
            None,
        )
        if inquiry is None:
            raise NotFoundError("Inquiry", inquiry_id)
        draft.inquiry_id = inquiry.inquiry_id
        draft.customer_name = inquiry.name
        draft.customer_email = inquiry.email
        logger.debug("Linked inquiry %s (%s) to event draft", inquiry.inquiry_id, inquiry.case_id)
        return draft

    def clear_inquiry(self, draft: EventDraft) -> EventDraft:
        draft.inquiry_id = None
        draft.customer_name = ""
        draft.customer_email = ""
        return draft
