"""Completion ledger models"""
from datetime import date
from typing import Optional
from pydantic import BaseModel


class CompletionResult(BaseModel):
    """Outcome of marking a day complete"""
    user_id: int
    day: date
    note: Optional[str] = None
    streak: int
    new_achievements: list[str] = []
