"""Request schema for the account upgrade form."""

from pydantic import BaseModel, Field


class PaymentRequest(BaseModel):
    """
    Payment form for the standard -> upgraded purchase.

    Formats are checked by the account service; no payment is captured and the
    card fields are never stored.
    """

    first_name: str = Field(..., max_length=255)
    last_name: str = Field(..., max_length=255)
    address: str = Field(..., max_length=255)
    card_number: str = Field(..., max_length=32)
    cvc: str = Field(..., max_length=8)
    exp_month: str = Field(..., max_length=4)
    exp_year: str = Field(..., max_length=4)
