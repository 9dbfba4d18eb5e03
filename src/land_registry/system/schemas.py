"""Pydantic schema for the system stats endpoint."""

from land_registry.common.schemas import CamelModel


class StatsResponse(CamelModel):
    user_count: int
    verifier_count: int
    land_count: int
    pending_registrations: int
    pending_transfers: int
    verified_lands: int
    transaction_count: int
    completed_transactions: int
