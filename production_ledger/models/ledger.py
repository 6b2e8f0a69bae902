"""
Core Data Models for Production Ledger

These models define the schemas for all data flowing through the ledger.
They are designed to:
1. Keep persisted records immutable once created
2. Serialize with the same camelCase field names the stored
   JSON and backup files use
3. Be cheap to copy and compare (round-trip checks compare models)

DESIGN DECISION: Stored records (ProductionEntry, Payment) are lenient.
Missing fields fall back to defaults (a fresh id, an empty date, zero)
and unknown fields are kept and written back, so any backup or stored
file that has the two collections loads. Drafts carry the raw form input; the derived
fields only ever come from the calculator.
"""

import datetime
from typing import Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


# Stock, drum and cone counts are integers by convention, but a
# fractional value typed into a form must survive a round trip unchanged.
Number = Union[int, float]


class LedgerModel(BaseModel):
    """Base for every ledger model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Dump using the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


def new_record_id() -> str:
    """Fresh opaque identifier for a ledger record."""
    return str(uuid4())


def _coerce_iso_date(v):
    """Accept a date object from a form widget, store it as YYYY-MM-DD."""
    if isinstance(v, datetime.datetime):
        return v.date().isoformat()
    if isinstance(v, datetime.date):
        return v.isoformat()
    return v


# =============================================================================
# STORED RECORDS
# =============================================================================

class ProductionEntry(LedgerModel):
    """
    One manufacturing event.

    CRITICAL: production_weight, total_amount and consumption_kg are
    derived at creation by the ledger store and never recomputed.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(
        default_factory=new_record_id,
        description="Opaque unique identifier"
    )
    date: str = Field(
        default="",
        description="Calendar date, YYYY-MM-DD"
    )

    # Raw form input
    running_drum: Number = Field(
        default=0,
        description="Running drum counter"
    )
    open_stock_grams: Number = Field(
        default=0,
        description="Stock at the start of the period, in grams"
    )
    production_cones: Number = Field(
        default=0,
        description="Cones produced"
    )
    closing_stock_grams: Number = Field(
        default=0,
        description="Stock at the end of the period, in grams"
    )
    rate_per_kg: Number = Field(
        default=0,
        description="Price per kilogram"
    )

    # Derived
    total_amount: Number = Field(
        default=0,
        description="production_weight * rate_per_kg, 2 decimal places"
    )
    production_weight: Number = Field(
        default=0,
        description="Production weight in kg, 3 decimal places"
    )
    consumption_kg: Number = Field(
        default=0,
        description="(open - closing stock) / 1000, may be negative"
    )

    @property
    def period_key(self) -> str:
        """YYYY-MM month this entry belongs to."""
        return self.date[:7]


class Payment(LedgerModel):
    """One payment received against the outstanding balance."""
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(
        default_factory=new_record_id,
        description="Opaque unique identifier"
    )
    date: str = Field(
        default="",
        description="Calendar date, YYYY-MM-DD"
    )
    amount: Number = Field(
        default=0,
        description="Amount paid"
    )
    note: str = Field(
        default="",
        description="Free-text note, may be empty"
    )

    @property
    def period_key(self) -> str:
        """YYYY-MM month this payment belongs to."""
        return self.date[:7]


# =============================================================================
# FORM INPUT
# =============================================================================

class EntryDraft(LedgerModel):
    """
    Production form input, before derivation.

    Only presence is checked. Physical plausibility (negative stock,
    more cones than drums can hold) is deliberately accepted.
    """

    date: str = Field(
        ...,
        min_length=1,
        description="Calendar date, YYYY-MM-DD"
    )
    running_drum: Number
    open_stock_grams: Number
    production_cones: Number
    closing_stock_grams: Number
    rate_per_kg: Number

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v):
        return _coerce_iso_date(v)


class PaymentDraft(LedgerModel):
    """
    Payment form input.

    The positive-amount rule is enforced by the ledger store, not here,
    so the rejection can be reported as a ledger decision.
    """

    date: str = Field(
        ...,
        min_length=1,
        description="Calendar date, YYYY-MM-DD"
    )
    amount: Number
    note: str = ""

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v):
        return _coerce_iso_date(v)


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class SummaryStats(LedgerModel):
    """
    Aggregate over a selected set of entries and payments.

    Never persisted. Values are unrounded; formatting belongs
    to the presentation layer.
    """
    model_config = ConfigDict(frozen=True)

    total_production: Number = Field(
        default=0,
        description="Total cones produced"
    )
    total_weight: float = Field(
        default=0.0,
        description="Total production weight in kg"
    )
    total_value: float = Field(
        default=0.0,
        description="Total value of production"
    )
    net_consumption: float = Field(
        default=0.0,
        description="Net stock consumption in kg"
    )
    total_paid: float = Field(
        default=0.0,
        description="Total payments received"
    )
    outstanding_balance: float = Field(
        default=0.0,
        description="total_value - total_paid; negative means overpaid"
    )

    @property
    def is_overpaid(self) -> bool:
        """More has been paid than the production is worth."""
        return self.outstanding_balance < 0


class BackupDocument(LedgerModel):
    """
    Full ledger backup.

    Always holds the complete collections, never a period subset.
    """

    entries: list[ProductionEntry] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    version: str = Field(
        default="1.0",
        description="Backup format version"
    )
    export_date: str = Field(
        ...,
        description="ISO timestamp of the export"
    )
